from __future__ import annotations

import json
import os

import pytest

from lastseen.core.config import ConfigManager
from lastseen.core.config.models import LastSeenConfig
from lastseen.core.errors import ConfigError


def _write(path: str, obj) -> None:  # noqa: ANN001
    with open(path, "w", encoding="utf-8") as f:
        if isinstance(obj, str):
            f.write(obj)
        else:
            json.dump(obj, f)


def test_missing_config_writes_defaults(fs):
    cm = ConfigManager(fs=fs)
    cfg = cm.load()
    assert cfg == LastSeenConfig()
    assert cfg.autosave_interval_seconds == 600
    with open(fs.app, "r", encoding="utf-8") as f:
        assert json.load(f)["data_file"] == "last-seen.yml"


def test_read_only_does_not_write(tmp_path):
    from lastseen.core.config.paths import ConfigFsPaths

    fs = ConfigFsPaths(str(tmp_path))
    cfg = ConfigManager(fs=fs, read_only=True).load()
    assert cfg.debug is False
    assert not os.path.exists(fs.config_dir)


def test_values_are_loaded(fs):
    _write(fs.app, {"debug": True, "autosave_interval_seconds": 30, "date_format": "%Y-%m-%d"})
    cfg = ConfigManager(fs=fs).load()
    assert cfg.debug is True
    assert cfg.autosave_interval_seconds == 30
    assert cfg.date_format == "%Y-%m-%d"


def test_corrupt_config_is_moved_aside(fs, caplog):
    _write(fs.app, "{not json")
    cfg = ConfigManager(fs=fs).load()
    assert cfg == LastSeenConfig()
    moved = [n for n in os.listdir(fs.backups_dir) if n.endswith(".corrupt.json")]
    assert len(moved) == 1
    assert "using defaults" in caplog.text
    with open(fs.app, "r", encoding="utf-8") as f:
        assert json.load(f)["config_version"] == 1


@pytest.mark.parametrize(
    "raw",
    [
        {"unknown_key": 1},
        {"autosave_interval_seconds": 0},
        {"data_file": "../elsewhere.yml"},
        {"players_file": ""},
        {"date_format": "  "},
    ],
)
def test_invalid_values_raise_config_error(fs, raw):
    _write(fs.app, raw)
    with pytest.raises(ConfigError) as ei:
        ConfigManager(fs=fs).load()
    assert ei.value.recoverable is False
    assert ei.value.context["errors"]


def test_get_caches_loaded_config(fs):
    cm = ConfigManager(fs=fs)
    cfg = cm.get()
    assert cm.get() is cfg
    assert cfg.players_file == "players.json"
