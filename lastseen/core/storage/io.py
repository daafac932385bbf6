from __future__ import annotations

import os
import shutil
import tempfile
import time
from typing import Optional

from lastseen.core.errors import StorageIOError


def _ts() -> str:
    return time.strftime("%Y%m%d_%H%M%S", time.gmtime())


def ensure_file(path: str) -> bool:
    """
    Create an empty file at path (and its directory) if it does not exist.
    Returns True if the file was created.
    """
    if os.path.exists(path):
        return False
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "a", encoding="utf-8"):
            pass
    except OSError as e:
        raise StorageIOError(f"Cannot create {path}: {e}", path=path) from e
    return True


def read_text(path: str) -> Optional[str]:
    """Return the file contents, or None if the file does not exist."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise StorageIOError(f"Cannot read {path}: {e}", path=path) from e


def atomic_write_text(path: str, text: str) -> None:
    directory = os.path.dirname(path) or "."
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".tmp_", suffix=".yml", dir=directory)
    except OSError as e:
        raise StorageIOError(f"Cannot write {path}: {e}", path=path) from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            try:
                f.flush()
                os.fsync(f.fileno())
            except OSError:
                pass
        os.replace(tmp, path)
    except OSError as e:
        raise StorageIOError(f"Cannot write {path}: {e}", path=path) from e
    finally:
        try:
            if os.path.exists(tmp):
                os.remove(tmp)
        except OSError:
            pass


def backup_corrupt(path: str, *, suffix: str = ".corrupt.yml") -> Optional[str]:
    """
    Copy a file that failed to load to <name>.<ts><suffix> next to it,
    before it is overwritten by the next save.
    """
    if not os.path.exists(path):
        return None
    root, _ext = os.path.splitext(path)
    dst = f"{root}.{_ts()}{suffix}"
    try:
        shutil.copy2(path, dst)
    except OSError as e:
        raise StorageIOError(f"Cannot back up corrupt file {path}: {e}", path=path) from e
    return dst
