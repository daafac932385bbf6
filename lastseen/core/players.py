from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lastseen.core.config.io import atomic_write_json, read_json_file
from lastseen.core.errors import StorageIOError
from lastseen.core.storage.io import backup_corrupt
from lastseen.core.storage.store import normalize_key


class PlayerInfo(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    first_played: int = Field(default=0, ge=0)


class PlayerRoster(BaseModel):
    model_config = ConfigDict(extra="forbid")
    roster_version: int = Field(default=1, ge=1)
    players: Dict[str, PlayerInfo] = Field(default_factory=dict)


class PlayerDirectory:
    """
    Cache of every player ever seen, keyed by lower-cased name, plus the set
    of players currently online.

    Lookups are dictionary hits; the roster file is only written when a new
    player registers.
    """

    def __init__(self, path: str, *, logger=None, debug: bool = False):
        self.path = path
        self.logger = logger or logging.getLogger("lastseen")
        self.debug = bool(debug)
        self._roster = PlayerRoster()
        self._online: Set[str] = set()
        self._backup_before_save = False

    def __len__(self) -> int:
        return len(self._roster.players)

    # ---- lifecycle ----
    def load(self) -> int:
        start = time.monotonic()
        rr = read_json_file(self.path)
        if rr.ok:
            try:
                roster = PlayerRoster.model_validate(rr.data)
                self._roster = PlayerRoster(players={normalize_key(k): v for k, v in roster.players.items()})
            except ValidationError as e:
                self.logger.error(f"Cannot load player roster: {e.error_count()} invalid field(s)")
                self._roster = PlayerRoster()
                self._backup_before_save = True
        elif rr.error != "missing":
            self.logger.error(f"Cannot load player roster: {rr.error}")
            self._roster = PlayerRoster()
            self._backup_before_save = True
        if self.debug:
            self.logger.info(f"Player caching elapsed time: {int((time.monotonic() - start) * 1000)}ms")
        return len(self._roster.players)

    def save(self) -> bool:
        try:
            if self._backup_before_save:
                moved = backup_corrupt(self.path, suffix=".corrupt.json")
                if moved:
                    self.logger.warning(f"Kept unreadable player roster as {moved}")
                self._backup_before_save = False
            atomic_write_json(self.path, self._roster.model_dump())
        except StorageIOError as e:
            self.logger.error(f"Cannot save player roster: {e.user_message}")
            return False
        except OSError as e:
            self.logger.error(f"Cannot save player roster: {e}")
            return False
        return True

    # ---- queries ----
    def lookup(self, name: str) -> Optional[PlayerInfo]:
        return self._roster.players.get(normalize_key(name))

    def is_online(self, name: str) -> bool:
        return normalize_key(name) in self._online

    def online_player(self, name: str) -> Optional[PlayerInfo]:
        key = normalize_key(name)
        if key not in self._online:
            return None
        return self._roster.players.get(key)

    def online_names(self) -> List[str]:
        return sorted(info.name for k, info in self._roster.players.items() if k in self._online)

    # ---- updates ----
    def register(self, name: str, now_ms: int) -> bool:
        """Add a brand-new player. Returns True if the player was not known."""
        key = normalize_key(name)
        if not key or key in self._roster.players:
            return False
        self._roster.players[key] = PlayerInfo(name=str(name).strip(), first_played=int(now_ms))
        self.save()
        return True

    def mark_online(self, name: str) -> None:
        key = normalize_key(name)
        if key:
            self._online.add(key)

    def mark_offline(self, name: str) -> None:
        self._online.discard(normalize_key(name))
