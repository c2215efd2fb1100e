# rollcsv/io/rotation.py
from __future__ import annotations

import logging
import os
from typing import Dict, Optional, Set

from rollcsv.errors import RotationExhaustedError

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


def split_stem_ext(path: str) -> tuple[str, Optional[str]]:
    """
    Разделить путь по последней точке в ИМЕНИ файла.
    Без точки (или с точкой в конце) расширения нет: вернём None.
    """
    head, name = os.path.split(path)
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem or not ext:
        return path, None
    return os.path.join(head, stem), ext


def format_index(index: int, pad: str) -> str:
    # как есть: берём последние len(pad) символов от pad + index,
    # при переполнении старшие цифры теряются
    text = f"{pad}{index}"
    return text[-len(pad):] if pad else text


def index_fits(index: int, pad: str) -> bool:
    return not pad or len(str(index)) <= len(pad)


def build_candidate_name(path: str, index: int, pad: str = "000") -> str:
    """data.csv + 7 -> data.007.csv; data + 7 -> data.007"""
    stem, ext = split_stem_ext(path)
    parts = [stem, format_index(index, pad)]
    if ext is not None:
        parts.append(ext)
    return ".".join(parts)


class RollingPathResolver:
    """
    Выбор физического файла для очередной записи.

    Держит счётчик номера на каждый базовый путь (только в памяти, растёт
    монотонно). Текущий файл остаётся выбранным, пока он меньше порога.
    """

    def __init__(self, max_file_size_mb: Optional[float] = None, pad: str = "000"):
        if max_file_size_mb is not None and max_file_size_mb < 0:
            raise ValueError(f"max_file_size_mb must be >= 0, got {max_file_size_mb}")
        self.max_file_size_mb = max_file_size_mb
        self.pad = pad
        self._indexes: Dict[str, int] = {}

    @property
    def enabled(self) -> bool:
        return bool(self.max_file_size_mb)

    def current_index(self, base_path: str) -> int:
        return self._indexes.get(os.fspath(base_path), 0)

    def resolve(self, base_path: str) -> str:
        base = os.fspath(base_path)
        if not self.enabled:
            return base

        index = self._indexes.setdefault(base, 0)
        seen: Set[str] = set()
        while True:
            name = build_candidate_name(base, index, self.pad)
            if not os.path.exists(name):
                return name

            size_mb = os.stat(name).st_size / BYTES_PER_MB
            if size_mb < self.max_file_size_mb:
                return name

            # файл заполнен, переходим к следующему номеру
            seen.add(name)
            index += 1
            self._indexes[base] = index
            if not index_fits(index, self.pad):
                logger.warning(
                    "Rotation index %d for %s does not fit pad '%s'; names wrap around",
                    index, base, self.pad,
                )
                if build_candidate_name(base, index, self.pad) in seen:
                    raise RotationExhaustedError(base, self.pad, index)
            else:
                logger.info("Rotating %s: %s is full (%.2f MB), next index %d", base, name, size_mb, index)
