# rollcsv/io/profiles.py
from __future__ import annotations

import csv
from enum import Enum
from typing import Any, Dict, Optional


class EncodingProfile(Enum):
    """Набор правил записи: разделитель и квотирование."""

    LEGACY = "legacy"
    MODERN = "modern"


# общие для обоих профилей
QUOTE_CHAR = '"'
ROW_DELIMITER = "\n"
APPEND_SEPARATOR = "\r\n"

# умолчания токенайзера при чтении
DEFAULT_PARSE_OPTIONS: Dict[str, Any] = {
    "headers": True,
    "delimiter": ",",
    "quote": '"',
    "escape": '"',
    "encoding": "utf-8",
    "chunksize": 100_000,
    "skip_blank_lines": True,
}


def profile_from_name(name: str) -> EncodingProfile:
    key = (name or "").strip().lower()
    for p in EncodingProfile:
        if p.value == key:
            return p
    raise ValueError(f"Unknown encoding profile '{name}'")


def format_options(profile: EncodingProfile) -> Dict[str, Any]:
    """
    Опции для DataFrame.to_csv под выбранный профиль.

    legacy: ';' и квотирование только там, где без него нельзя
    modern: ',' и кавычки вокруг каждой ячейки, включая заголовок
    Экранирование кавычки в обоих случаях: удвоение.
    """
    if profile is EncodingProfile.LEGACY:
        sep, quoting = ";", csv.QUOTE_MINIMAL
    elif profile is EncodingProfile.MODERN:
        sep, quoting = ",", csv.QUOTE_ALL
    else:
        raise ValueError(f"Unsupported profile: {profile!r}")
    return {
        "sep": sep,
        "quoting": quoting,
        "quotechar": QUOTE_CHAR,
        "doublequote": True,
        "lineterminator": ROW_DELIMITER,
        "index": False,
    }


def _check_char(name: str, value: Any, *, allow_empty: bool = False) -> None:
    if allow_empty and value in (None, ""):
        return
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"Option '{name}' must be a single character, got {value!r}")


def validate_parse_options(options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Проверить опции до любого ввода-вывода. Неверные опции: ошибка
    вызывающего (ValueError), а не ошибка чтения, которую глотает read.
    """
    delimiter = options.get("delimiter")
    if not isinstance(delimiter, str) or not delimiter:
        raise ValueError(f"Option 'delimiter' must be a non-empty string, got {delimiter!r}")
    _check_char("quote", options.get("quote"))
    _check_char("escape", options.get("escape"), allow_empty=True)

    headers = options.get("headers")
    if isinstance(headers, (list, tuple)):
        if not headers or not all(isinstance(h, str) for h in headers):
            raise ValueError(f"Option 'headers' list must hold column names, got {headers!r}")
    elif not isinstance(headers, bool):
        raise ValueError(f"Option 'headers' must be a bool or a list of names, got {headers!r}")

    chunksize = options.get("chunksize")
    if chunksize is not None and (isinstance(chunksize, bool) or not isinstance(chunksize, int) or chunksize <= 0):
        raise ValueError(f"Option 'chunksize' must be a positive int, got {chunksize!r}")
    if not isinstance(options.get("encoding"), str):
        raise ValueError(f"Option 'encoding' must be a string, got {options.get('encoding')!r}")
    return options


def merge_parse_options(options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Поверхностное слияние: ключи вызывающего побеждают умолчания."""
    return validate_parse_options({**DEFAULT_PARSE_OPTIONS, **(options or {})})


def to_read_csv_kwargs(options: Dict[str, Any]) -> Dict[str, Any]:
    """Перевод опций токенайзера в аргументы pandas.read_csv (без chunksize/encoding)."""
    headers = options.get("headers", True)
    kwargs: Dict[str, Any] = {
        "sep": options.get("delimiter", ","),
        "quotechar": options.get("quote", '"'),
        "dtype": str,                # всё строками, без приведения типов
        "keep_default_na": False,
        "skip_blank_lines": bool(options.get("skip_blank_lines", True)),
    }
    escape = options.get("escape", '"')
    if escape and escape != kwargs["quotechar"]:
        kwargs["escapechar"] = escape
        kwargs["doublequote"] = False
    else:
        kwargs["doublequote"] = True

    if isinstance(headers, (list, tuple)):
        kwargs["header"] = None
        kwargs["names"] = list(headers)
    elif headers:
        kwargs["header"] = 0
    else:
        kwargs["header"] = None
    return kwargs
