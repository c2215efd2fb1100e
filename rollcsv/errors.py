# rollcsv/errors.py
from __future__ import annotations


class RollCsvError(Exception):
    """Базовая ошибка пакета."""


class RecordValidationError(RollCsvError, ValueError):
    """Набор записей нельзя записать (пустой, без ключей, не словари)."""


class CsvWriteError(RollCsvError, OSError):
    """Ошибка открытия/записи физического файла."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class RotationExhaustedError(RollCsvError):
    """Все имена, которые выражает шаблон номера, уже заполнены."""

    def __init__(self, base_path: str, pad: str, index: int):
        super().__init__(
            f"No free rotation slot for '{base_path}': pad '{pad}' wrapped at index {index}"
        )
        self.base_path = base_path
        self.pad = pad
        self.index = index


class MalformedRowError(RollCsvError, ValueError):
    """В строке данных больше полей, чем в заголовке."""

    def __init__(self, path: str, row: int, extra: str):
        super().__init__(f"{path}: data row {row} has more fields than the header (extra: '{extra}')")
        self.path = path
        self.row = row
