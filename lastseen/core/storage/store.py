from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import yaml

from lastseen.core.errors import StorageIOError
from lastseen.core.storage.io import read_text

# players.<lowercased-name>.last-seen
PLAYERS_SECTION = "players"
LAST_SEEN = "last-seen"
# 9999-12-31T23:59:59.999Z
MAX_MILLIS = 253_402_300_799_999


def normalize_key(name: str) -> str:
    return str(name).strip().lower()


def parse_document(text: str) -> Tuple[Dict[str, int], List[str]]:
    """
    Parse the YAML text of a last-seen file.

    Returns (records, warnings). Entries that are not usable (non-mapping
    player nodes, missing, non-integer or out-of-range timestamps) are
    skipped and reported in warnings. Raises StorageIOError when the
    document as a whole is not a last-seen file.
    """
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise StorageIOError(f"Malformed YAML: {e}") from e
    if doc is None:
        return {}, []
    if not isinstance(doc, dict):
        raise StorageIOError("Top level is not a mapping.")
    players = doc.get(PLAYERS_SECTION)
    if players is None:
        return {}, []
    if not isinstance(players, dict):
        raise StorageIOError(f"'{PLAYERS_SECTION}' is not a mapping.")

    records: Dict[str, int] = {}
    warnings: List[str] = []
    for raw_name, entry in players.items():
        name = normalize_key(raw_name)
        if not name:
            warnings.append("skipped entry with empty name")
            continue
        if not isinstance(entry, dict):
            warnings.append(f"skipped {name}: not a mapping")
            continue
        value = entry.get(LAST_SEEN)
        if isinstance(value, bool) or not isinstance(value, int):
            warnings.append(f"skipped {name}: {LAST_SEEN} is not an integer")
            continue
        if value < 0:
            warnings.append(f"skipped {name}: negative {LAST_SEEN}")
            continue
        if value > MAX_MILLIS:
            warnings.append(f"skipped {name}: {LAST_SEEN} out of range")
            continue
        # two spellings of one name collapse to the most recent time stamp
        records[name] = max(value, records.get(name, 0))
    return records, warnings


class TimestampStore:
    """
    In-memory map of lower-cased player name -> last-seen epoch millis.

    Not thread-safe. SaveCoordinator guarantees that either the foreground
    thread or the background writer touches it, never both.
    """

    def __init__(self, records: Optional[Mapping[str, int]] = None):
        self._records: Dict[str, int] = {}
        self.dirty = False
        self.discarded_corrupt = False
        for name, millis in (records or {}).items():
            self._records[normalize_key(name)] = int(millis)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_key(name) in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def keys(self) -> List[str]:
        return sorted(self._records)

    def snapshot(self) -> Dict[str, int]:
        return dict(self._records)

    def get(self, name: str) -> int:
        return int(self._records.get(normalize_key(name), 0))

    def set(self, name: str, millis: int) -> None:
        key = normalize_key(name)
        if not key:
            raise ValueError("player name must not be empty")
        if isinstance(millis, bool) or not isinstance(millis, int):
            raise ValueError(f"time stamp must be an integer, got {type(millis).__name__}")
        if millis < 0:
            raise ValueError("time stamp must not be negative")
        if millis > MAX_MILLIS:
            raise ValueError("time stamp out of range")
        self._records[key] = millis
        self.dirty = True

    def mark_clean(self) -> None:
        self.dirty = False

    # ---- file format ----
    def to_document(self) -> Dict[str, Any]:
        return {PLAYERS_SECTION: {name: {LAST_SEEN: millis} for name, millis in self._records.items()}}

    def serialize(self) -> str:
        return yaml.safe_dump(self.to_document(), default_flow_style=False, sort_keys=True, allow_unicode=True)

    @classmethod
    def deserialize(cls, text: str, *, logger=None) -> "TimestampStore":
        records, warnings = parse_document(text)
        log = logger or logging.getLogger("lastseen")
        for w in warnings:
            log.warning(f"Last seen data: {w}")
        return cls(records)

    @classmethod
    def from_file(cls, path: str, *, logger=None) -> "TimestampStore":
        """
        Load from path. Never raises: a missing file gives an empty store, an
        unreadable or malformed one is logged and gives an empty store with
        discarded_corrupt set. The file itself is left untouched.
        """
        log = logger or logging.getLogger("lastseen")
        try:
            text = read_text(path)
            if text is None:
                return cls()
            return cls.deserialize(text, logger=log)
        except StorageIOError as e:
            log.error(f"Cannot load storage: {e.user_message}")
            store = cls()
            store.discarded_corrupt = True
            return store
