# rollcsv/logging/formatter.py
from __future__ import annotations

import os
from datetime import datetime
from typing import Dict, Optional


def _size_mb(path: str) -> Optional[float]:
    try:
        return os.path.getsize(path) / (1024 * 1024)
    except OSError:
        return None


def format_header(
    *,
    input_csv: str,
    output_csv: str,
    profile: str,
    rows_total: int,
    batches: int,
    max_file_size_mb: Optional[float] = None,
    pad: str = "000",
    delimiter: str = ",",
    encoding: str = "auto",
    duration_sec: float | None = None,
    rows_per_sec: float | None = None,
) -> str:
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    rotation = f"{max_file_size_mb} MB, шаблон номера '{pad}'" if max_file_size_mb else "ВЫКЛ"
    lines = [
        "======== ОТЧЁТ РАЗБИЕНИЯ CSV ========",
        f"Дата/время: {ts}",
        f"Файл входной: {input_csv}",
        f"Файл выходной (базовый): {output_csv}",
        f"Профиль записи: {profile}",
        f"Ротация: {rotation}",
        f"Разделитель входа: {delimiter}",
        f"Кодировка входа: {encoding}",
        f"Строк обработано: {rows_total}",
        f"Пачек записано: {batches}",
    ]
    if duration_sec is not None:
        lines.append(f"Длительность: {duration_sec:.2f} сек")
    if rows_per_sec is not None:
        lines.append(f"Скорость: {rows_per_sec:.2f} строк/сек")
    lines += [
        "=====================================",
        "",
    ]
    return "\n".join(lines)


def format_files_section(*, files: Dict[str, int]) -> str:
    lines = ["================ ФАЙЛЫ ==============="]
    if not files:
        lines.append("(ничего не записано)")
    for path, rows in files.items():
        size = _size_mb(path)
        size_txt = f"{size:.2f} MB" if size is not None else "нет на диске"
        lines.append(f"{path}: строк {rows}, размер {size_txt}")
    lines.append("")
    return "\n".join(lines)


def format_footer() -> str:
    return "=============== КОНЕЦ ОТЧЁТА ===============\n"
