"""Tests for YAML settings and building a RollingCsv from them."""

import pytest

from rollcsv.config import DEFAULT_SETTINGS, load_settings, save_settings, store_from_settings
from rollcsv.io.profiles import EncodingProfile


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "absent.yaml") == DEFAULT_SETTINGS
    assert load_settings(None) == DEFAULT_SETTINGS


def test_file_values_override_defaults(tmp_path):
    path = tmp_path / "split.yaml"
    path.write_text('profile: legacy\nmax_file_size_mb: 5\npad: "0000"\n', encoding="utf-8")
    settings = load_settings(path)
    assert settings["profile"] == "legacy"
    assert settings["max_file_size_mb"] == 5
    assert settings["pad"] == "0000"
    assert settings["chunksize"] == DEFAULT_SETTINGS["chunksize"]


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path)


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "settings.yaml"
    data = {**DEFAULT_SETTINGS, "profile": "legacy", "pad": "00"}
    save_settings(path, data)
    assert load_settings(path) == data


def test_store_from_settings():
    store = store_from_settings({**DEFAULT_SETTINGS, "profile": "legacy", "max_file_size_mb": 2, "pad": "00"})
    assert store.profile is EncodingProfile.LEGACY
    assert store.max_file_size_mb == 2.0
    assert store.pad == "00"
    assert store.append_check == "logical"


def test_zero_threshold_disables_rotation():
    store = store_from_settings({**DEFAULT_SETTINGS, "max_file_size_mb": 0})
    assert store.max_file_size_mb is None
    assert store.profile is EncodingProfile.MODERN
    assert store.resolve("data.csv") == "data.csv"


def test_unknown_profile_rejected():
    with pytest.raises(ValueError):
        store_from_settings({**DEFAULT_SETTINGS, "profile": "tsv"})
