# rollcsv/io/writer.py
from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, List, Sequence

import pandas as pd

from rollcsv.errors import CsvWriteError, RecordValidationError
from rollcsv.io.profiles import APPEND_SEPARATOR, ROW_DELIMITER, EncodingProfile, format_options

# сколько записей форматируем за один проход to_csv
WRITE_BATCH = 10_000


def header_from_records(records: Sequence[Mapping[str, Any]]) -> List[str]:
    """Заголовок = ключи первой записи в их исходном порядке."""
    if not records:
        raise RecordValidationError("Cannot write an empty record set")
    first = records[0]
    for rec in records:
        if not isinstance(rec, Mapping):
            raise RecordValidationError(f"Records must be mappings, got {type(rec).__name__}")
    columns = list(first.keys())
    if not columns:
        raise RecordValidationError("First record has no keys, header cannot be derived")
    return columns


def build_frame(records: Sequence[Mapping[str, Any]], columns: List[str]) -> pd.DataFrame:
    # отсутствующие ключи -> пустая ячейка, лишние ключи отбрасываются
    rows = [[rec.get(c) for c in columns] for rec in records]
    return pd.DataFrame(rows, columns=columns, dtype=object)


def _strip_terminator(text: str) -> str:
    return text[: -len(ROW_DELIMITER)] if text.endswith(ROW_DELIMITER) else text


class CsvIncrementalWriter:
    """
    Дописывает пачки записей в один физический файл.

    Строки внутри пачки разделены '\\n', пачка не заканчивается переводом
    строки; при дописывании в существующий файл сначала пишется CRLF.
    """

    def __init__(self, path: str, profile: EncodingProfile):
        self.path = path
        self.profile = profile
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        except OSError as e:
            raise CsvWriteError(path, f"Cannot create directory. Error: {e}") from e

    def render(self, records: Sequence[Mapping[str, Any]], columns: List[str], *, header: bool) -> str:
        frame = build_frame(records, columns)
        return _strip_terminator(frame.to_csv(header=header, **format_options(self.profile)))

    def write_records(
        self,
        records: Sequence[Mapping[str, Any]],
        columns: List[str],
        *,
        header: bool,
        separator: bool,
    ) -> int:
        """Записать пачку; возврат только после закрытия файла. Возвращает число строк."""
        written = 0
        try:
            with open(self.path, "a", encoding="utf-8", newline="") as fh:
                if separator:
                    fh.write(APPEND_SEPARATOR)
                for start in range(0, len(records), WRITE_BATCH):
                    batch = records[start:start + WRITE_BATCH]
                    if start:
                        fh.write(ROW_DELIMITER)
                    fh.write(self.render(batch, columns, header=header and start == 0))
                    written += len(batch)
                fh.flush()
        except OSError as e:
            raise CsvWriteError(self.path, f"Failed to write CSV. Error: {e}") from e
        return written
