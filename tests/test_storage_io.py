from __future__ import annotations

import os

import pytest

from lastseen.core.errors import StorageIOError
from lastseen.core.storage.io import atomic_write_text, backup_corrupt, ensure_file, read_text


def test_ensure_file_creates_once(tmp_path):
    p = str(tmp_path / "sub" / "last-seen.yml")
    assert ensure_file(p) is True
    assert os.path.exists(p)
    assert ensure_file(p) is False


def test_ensure_file_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(StorageIOError):
        ensure_file(str(blocker / "last-seen.yml"))


def test_read_text_missing_returns_none(tmp_path):
    assert read_text(str(tmp_path / "nope.yml")) is None


def test_atomic_write_replaces_and_cleans_temp(tmp_path):
    p = str(tmp_path / "last-seen.yml")
    atomic_write_text(p, "players: {}\n")
    atomic_write_text(p, "players:\n  bob:\n    last-seen: 1\n")
    assert read_text(p) == "players:\n  bob:\n    last-seen: 1\n"
    assert [f for f in os.listdir(tmp_path) if f.startswith(".tmp_")] == []


def test_atomic_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(StorageIOError) as ei:
        atomic_write_text(str(blocker / "last-seen.yml"), "players: {}\n")
    assert ei.value.code == "storage_io_error"


def test_backup_corrupt_copies_beside_original(tmp_path):
    p = tmp_path / "last-seen.yml"
    p.write_text("garbage: [", encoding="utf-8")
    dst = backup_corrupt(str(p))
    assert dst is not None
    assert dst.endswith(".corrupt.yml")
    assert open(dst, "r", encoding="utf-8").read() == "garbage: ["
    assert p.exists()


def test_backup_corrupt_missing_is_noop(tmp_path):
    assert backup_corrupt(str(tmp_path / "none.yml")) is None


def test_backup_corrupt_with_custom_suffix(tmp_path):
    p = tmp_path / "players.json"
    p.write_text("{", encoding="utf-8")
    dst = backup_corrupt(str(p), suffix=".corrupt.json")
    assert os.path.basename(dst).startswith("players.")
    assert dst.endswith(".corrupt.json")
