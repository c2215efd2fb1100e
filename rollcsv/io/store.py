# rollcsv/io/store.py
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence

from rollcsv.io.profiles import EncodingProfile
from rollcsv.io.reader import Record, read_records
from rollcsv.io.rotation import RollingPathResolver
from rollcsv.io.writer import CsvIncrementalWriter, header_from_records

logger = logging.getLogger(__name__)

# по какому пути решать "дописываем или новый файл"
APPEND_CHECKS = ("logical", "physical")


class RollingCsv:
    """
    Чтение CSV в список записей и запись списка записей с ротацией файлов.

    Профиль и порог задаются один раз при создании. Счётчики ротации живут
    в экземпляре, поэтому один и тот же объект нужно передавать всем, кто
    пишет в один базовый путь. Параллельные write() в один путь не
    поддерживаются: вызовы должны идти последовательно.
    """

    def __init__(
        self,
        legacy: bool = False,
        max_file_size_mb: Optional[float] = None,
        pad: str = "000",
        append_check: str = "logical",
    ):
        if append_check not in APPEND_CHECKS:
            raise ValueError(f"append_check must be one of {APPEND_CHECKS}, got '{append_check}'")
        self.profile = EncodingProfile.LEGACY if legacy else EncodingProfile.MODERN
        self.append_check = append_check
        self.resolver = RollingPathResolver(max_file_size_mb=max_file_size_mb, pad=pad)

    @property
    def max_file_size_mb(self) -> Optional[float]:
        return self.resolver.max_file_size_mb

    @property
    def pad(self) -> str:
        return self.resolver.pad

    def resolve(self, base_path: str) -> str:
        return self.resolver.resolve(base_path)

    def read(self, path: str, options: Optional[Dict[str, Any]] = None) -> List[Record]:
        # ротация к чтению не применяется: читаем ровно указанный файл
        return read_records(os.fspath(path), options)

    def write(self, base_path: str, records: Sequence[Mapping[str, Any]]) -> str:
        """
        Записать пачку записей; возвращает путь физического файла.

        По умолчанию наличие файла проверяется по логическому пути, до выбора
        физического файла: если он есть, пишем CRLF и без заголовка. При
        включённой ротации логический файл обычно не существует, поэтому каждая
        пачка получает заголовок; append_check="physical" проверяет выбранный
        физический файл (нужно, когда несколько пачек ложатся в один файл).
        """
        columns = header_from_records(records)
        base = os.fspath(base_path)
        is_append = os.path.exists(base)
        target = self.resolver.resolve(base)
        if self.append_check == "physical":
            is_append = os.path.exists(target) and os.path.getsize(target) > 0

        writer = CsvIncrementalWriter(target, self.profile)
        rows = writer.write_records(records, columns, header=not is_append, separator=is_append)
        logger.debug(
            "Wrote %d rows to %s (%s, %s)",
            rows, target, self.profile.value, "append" if is_append else "new",
        )
        return target
