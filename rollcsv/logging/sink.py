# rollcsv/logging/sink.py
from __future__ import annotations
import io
import os
from typing import Iterable


class ReportSink:
    """
    Текстовый отчёт о прогоне. Пишется во временный файл рядом с целевым;
    на место отчёта он встаёт только при commit(), поэтому упавший прогон
    не оставляет половинчатый отчёт и не портит предыдущий.
    """

    def __init__(self, path: str):
        self.path = path
        self.tmp_path = f"{path}.part"
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        self._fh: io.TextIOWrapper = open(self.tmp_path, "w", encoding="utf-8")
        self.blocks = 0

    def write(self, text: str) -> None:
        self._fh.write(text)
        if not text.endswith("\n"):
            self._fh.write("\n")
        self.blocks += 1

    def write_blocks(self, blocks: Iterable[str]) -> None:
        for block in blocks:
            self.write(block)

    def commit(self) -> str:
        self._fh.flush()
        os.fsync(self._fh.fileno())
        self._fh.close()
        os.replace(self.tmp_path, self.path)
        return self.path

    def discard(self) -> None:
        if not self._fh.closed:
            self._fh.close()
        if os.path.exists(self.tmp_path):
            os.remove(self.tmp_path)

    def __enter__(self) -> "ReportSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None and not self._fh.closed:
            self.commit()
        else:
            self.discard()
