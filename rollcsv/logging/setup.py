# rollcsv/logging/setup.py
from __future__ import annotations

import logging
import os
from typing import List, Optional

from rich.logging import RichHandler

_INITIALIZED = False


def setup_logging(level: Optional[str] = None) -> None:
    """Консольный лог через rich; повторные вызовы ничего не делают."""
    global _INITIALIZED
    if _INITIALIZED:
        return
    lvl_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    lvl = getattr(logging, lvl_name, logging.INFO)
    if not isinstance(lvl, int):
        lvl = logging.INFO
    handlers: List[logging.Handler] = [
        RichHandler(rich_tracebacks=True, show_time=True, show_path=False)
    ]
    logging.basicConfig(
        level=lvl,
        format="%(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )
    _INITIALIZED = True
