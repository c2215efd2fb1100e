# rollcsv/config.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from rollcsv.io.profiles import EncodingProfile, profile_from_name
from rollcsv.io.store import RollingCsv

DEFAULT_SETTINGS: Dict[str, Any] = {
    "profile": "modern",          # legacy | modern
    "max_file_size_mb": None,     # None / 0 -> без ротации
    "pad": "000",
    "append_check": "logical",    # logical | physical
    # параметры чтения входного файла для разбиения
    "delimiter": ",",
    "encoding": "auto",
    "chunksize": 100_000,
}


def load_settings(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Настройки из YAML поверх умолчаний, без файла берём умолчания."""
    if path is None or not Path(path).exists():
        return dict(DEFAULT_SETTINGS)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping, got {type(data).__name__}")
    return {**DEFAULT_SETTINGS, **data}


def save_settings(path: str | Path, data: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, allow_unicode=True, sort_keys=True)


def store_from_settings(settings: Dict[str, Any]) -> RollingCsv:
    profile = profile_from_name(str(settings.get("profile", "modern")))
    size = settings.get("max_file_size_mb")
    return RollingCsv(
        legacy=profile is EncodingProfile.LEGACY,
        max_file_size_mb=float(size) if size else None,
        pad=str(settings.get("pad", "000")),
        append_check=str(settings.get("append_check", "logical")),
    )
