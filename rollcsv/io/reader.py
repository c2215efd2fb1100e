# rollcsv/io/reader.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional

import pandas as pd

from rollcsv.errors import MalformedRowError
from rollcsv.io.profiles import merge_parse_options, to_read_csv_kwargs

logger = logging.getLogger(__name__)

Record = Dict[str, str]

DEFAULT_CHUNKSIZE = 100_000

# ошибки, после которых чтение не падает, а отдаёт накопленное
READ_ERRORS = (OSError, UnicodeDecodeError, pd.errors.ParserError, MalformedRowError)

# лишняя колонка-ловушка: сюда попадают поля сверх заголовка
OVERFLOW_COLUMN = "\x00overflow"


def _with_overflow_column(path: str, encoding: str, params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Добавить к именам колонок ловушку для лишних полей. pandas при чтении
    чанками может молча обрезать длинную строку, поэтому ширину проверяем сами.
    Без заголовка (header=None и без names) ширина неизвестна: не проверяем.
    """
    names = params.get("names")
    if names is None:
        if params.get("header", 0) is None:
            return params
        head = pd.read_csv(path, encoding=encoding, nrows=0, **params)
        names = list(head.columns)
    return {**params, "names": list(names) + [OVERFLOW_COLUMN], "index_col": False}


def _checked_chunks(path: str, reader) -> Iterator[pd.DataFrame]:
    for chunk in reader:
        if OVERFLOW_COLUMN not in chunk.columns:
            yield chunk
            continue
        overflow = chunk[OVERFLOW_COLUMN].notna().to_numpy()
        data = chunk.drop(columns=[OVERFLOW_COLUMN])
        if not overflow.any():
            yield data
            continue
        pos = int(overflow.argmax())
        # хорошие строки до битой отдаём, дальше не читаем
        if pos:
            yield data.iloc[:pos]
        raise MalformedRowError(path, int(chunk.index[pos]) + 1, str(chunk[OVERFLOW_COLUMN].iloc[pos]))


def read_csv_in_chunks(
    path: str,
    *,
    delimiter: str = ",",
    encoding: str = "auto",
    chunksize: int = 100_000,
    **read_kwargs: Any,
) -> Iterator[pd.DataFrame]:
    """
    Читать CSV чанками, все значения строками. Строка с лишними полями
    (при известном заголовке) даёт MalformedRowError.
    encoding="auto": пробуем utf-8, затем cp1251, но только пока ни один
    чанк ещё не отдан наружу, иначе строки задвоились бы.
    """
    encodings_to_try = ["utf-8", "cp1251"] if encoding == "auto" else [encoding]
    params: Dict[str, Any] = {
        "sep": delimiter,
        "dtype": str,
        "keep_default_na": False,
    }
    params.update(read_kwargs)
    last_err: Optional[Exception] = None
    for enc in encodings_to_try:
        yielded = False
        try:
            enc_params = _with_overflow_column(path, enc, params)
            with pd.read_csv(path, encoding=enc, chunksize=chunksize, **enc_params) as reader:
                for chunk in _checked_chunks(path, reader):
                    yielded = True
                    yield chunk
            return
        except UnicodeDecodeError as e:
            if yielded:
                raise
            last_err = e
            continue
    raise last_err if last_err else RuntimeError("Failed to read CSV")


def frame_to_records(df: pd.DataFrame) -> List[Record]:
    # позиционные колонки (без заголовка) тоже превращаем в строки-ключи
    columns = [str(c) for c in df.columns]
    return [dict(zip(columns, row)) for row in df.itertuples(index=False, name=None)]


def read_records(path: str, options: Optional[Dict[str, Any]] = None) -> List[Record]:
    """
    Прочитать файл целиком в список записей.

    Никогда не бросает на ошибках ввода/разбора (включая строку с лишними
    полями): ошибка пишется в лог, возвращается то, что успели накопить.
    Неверные опции бросают ValueError до чтения.
    """
    opts = merge_parse_options(options)
    kwargs = to_read_csv_kwargs(opts)
    delimiter = kwargs.pop("sep")
    result: List[Record] = []
    try:
        for chunk in read_csv_in_chunks(
            path,
            delimiter=delimiter,
            encoding=opts.get("encoding", "utf-8"),
            chunksize=int(opts.get("chunksize") or DEFAULT_CHUNKSIZE),
            **kwargs,
        ):
            result.extend(frame_to_records(chunk))
    except pd.errors.EmptyDataError:
        logger.warning("CSV %s is empty", path)
    except READ_ERRORS as e:
        logger.error("Failed to read %s after %d rows: %s", path, len(result), e)
    return result

