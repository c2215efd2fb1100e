# rollcsv/pipeline/runner.py
from __future__ import annotations

import time
from contextlib import ExitStack
from typing import Any, Callable, Dict, Optional

from rollcsv.config import load_settings, store_from_settings
from rollcsv.io.reader import frame_to_records, read_csv_in_chunks
from rollcsv.logging.formatter import format_files_section, format_footer, format_header
from rollcsv.logging.sink import ReportSink


def _progress(cb, phase: str, rows_done: int, start_ts: float) -> None:
    if not cb:
        return
    elapsed = time.perf_counter() - start_ts
    cb({
        "phase": phase,
        "rows_done": rows_done,
        "elapsed_sec": elapsed,
        "rps": (rows_done / elapsed) if elapsed > 0 else 0.0,
    })


def run_split(
    input_csv: str,
    output_csv: str,
    *,
    settings: Optional[Dict[str, Any]] = None,
    config_yaml: Optional[str] = None,
    log_txt: Optional[str] = None,
    chunksize: Optional[int] = None,
    progress_cb: Optional[Callable[[Dict[str, Any]], None]] = None,
) -> Dict[str, Any]:
    """
    Переложить входной CSV в выходной через RollingCsv: каждый чанк входа
    пишется одной пачкой, при превышении порога файлы нумеруются.
    Пачки продолжают один поток, поэтому заголовок и CRLF решаются по
    физическому файлу (append_check="physical").
    Строка входа с лишними полями прерывает прогон (MalformedRowError);
    отчёт в этом случае не пишется, уже записанные пачки остаются.
    """
    # загрузка настроек: явный dict > YAML > умолчания
    cfg = load_settings(config_yaml)
    if settings:
        cfg.update(settings)
    if chunksize:
        cfg["chunksize"] = int(chunksize)
    cfg["append_check"] = "physical"

    store = store_from_settings(cfg)

    summary: Dict[str, Any] = {
        "rows_total": 0,
        "batches": 0,
        "files": {},       # физический путь -> строк
        "duration_sec": 0.0,
        "rows_per_sec": None,
    }

    with ExitStack() as stack:
        # отчёт открыт на весь прогон: при ошибке он отбрасывается, прежний остаётся
        report = stack.enter_context(ReportSink(log_txt)) if log_txt else None
        _split_chunks(input_csv, output_csv, store, cfg, summary, progress_cb)
        if report is not None:
            report.write_blocks([
                format_header(
                    input_csv=input_csv,
                    output_csv=output_csv,
                    profile=store.profile.value,
                    rows_total=summary["rows_total"],
                    batches=summary["batches"],
                    max_file_size_mb=store.max_file_size_mb,
                    pad=store.pad,
                    delimiter=cfg["delimiter"],
                    encoding=cfg["encoding"],
                    duration_sec=summary["duration_sec"],
                    rows_per_sec=summary["rows_per_sec"],
                ),
                format_files_section(files=summary["files"]),
                format_footer(),
            ])

    return summary


def _split_chunks(input_csv, output_csv, store, cfg, summary, progress_cb) -> None:
    start_ts = time.perf_counter()
    _progress(progress_cb, "start", 0, start_ts)

    # обработка чанками
    for chunk in read_csv_in_chunks(
        input_csv,
        delimiter=cfg["delimiter"],
        encoding=cfg["encoding"],
        chunksize=int(cfg["chunksize"]),
    ):
        records = frame_to_records(chunk)
        if not records:
            continue
        target = store.write(output_csv, records)

        summary["rows_total"] += len(records)
        summary["batches"] += 1
        summary["files"][target] = summary["files"].get(target, 0) + len(records)
        _progress(progress_cb, "processing", summary["rows_total"], start_ts)

    summary["duration_sec"] = time.perf_counter() - start_ts
    summary["rows_per_sec"] = (
        summary["rows_total"] / summary["duration_sec"] if summary["duration_sec"] > 0 else None
    )
    _progress(progress_cb, "done", summary["rows_total"], start_ts)
