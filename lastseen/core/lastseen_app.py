from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence

from lastseen.core.commands import CommandHandler, Reply
from lastseen.core.config.models import LastSeenConfig
from lastseen.core.config.paths import ConfigFsPaths
from lastseen.core.players import PlayerDirectory
from lastseen.core.storage.coordinator import SaveCoordinator
from lastseen.core.time_format import now_millis


class LastSeenApp:
    """
    Event and command wiring around the last-seen storage.

    Every method must be called from one thread (LastSeenRuntime does this);
    the storage underneath is only safe for a single foreground caller.
    """

    def __init__(
        self,
        *,
        cfg: LastSeenConfig,
        fs: ConfigFsPaths,
        logger=None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.cfg = cfg
        self.fs = fs
        self.logger = logger or logging.getLogger("lastseen")
        self.clock = clock or now_millis
        self.storage: Optional[SaveCoordinator] = None
        self.directory: Optional[PlayerDirectory] = None
        self.commands: Optional[CommandHandler] = None

    @property
    def enabled(self) -> bool:
        return self.storage is not None

    # ---- lifecycle ----
    def on_enable(self) -> None:
        if self.enabled:
            return
        start = time.monotonic()
        self.storage = SaveCoordinator(self.fs.data_path(self.cfg.data_file), logger=self.logger, debug=self.cfg.debug)
        self.directory = PlayerDirectory(self.fs.data_path(self.cfg.players_file), logger=self.logger, debug=self.cfg.debug)
        self.directory.load()
        self.commands = CommandHandler(storage=self.storage, directory=self.directory, clock=self.clock, date_format=self.cfg.date_format)
        self.logger.info(f"Last seen enabled ({len(self.storage.snapshot())} players tracked).")
        if self.cfg.debug:
            self.logger.info(f"Enable elapsed time: {int((time.monotonic() - start) * 1000)}ms")

    def on_disable(self) -> None:
        if self.storage is None:
            return
        self.storage.close()
        self.storage = None
        self.directory = None
        self.commands = None
        self.logger.info("Last seen disabled.")

    # ---- events ----
    def on_player_join(self, name: str) -> None:
        storage, directory = self._require()
        now = self.clock()
        storage.set(name, now)
        if directory.register(name, now):
            self.logger.info(f"First join of {name}.")
        directory.mark_online(name)

    def on_player_quit(self, name: str) -> None:
        storage, directory = self._require()
        storage.set(name, self.clock())
        directory.mark_offline(name)

    def on_command(self, command: str, args: Sequence[str]) -> List[Reply]:
        if self.commands is None:
            raise RuntimeError("LastSeenApp is not enabled")
        return self.commands.handle(command, args)

    def online_players(self) -> List[str]:
        _, directory = self._require()
        return directory.online_names()

    def autosave(self) -> bool:
        if self.storage is None:
            return False
        return self.storage.save_async()

    def save(self) -> None:
        storage, _ = self._require()
        storage.save_sync()

    def _require(self):
        if self.storage is None or self.directory is None:
            raise RuntimeError("LastSeenApp is not enabled")
        return self.storage, self.directory
