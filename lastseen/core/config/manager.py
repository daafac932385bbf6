from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from lastseen.core.config.io import atomic_write_json, ensure_dirs, move_aside_corrupt, read_json_file
from lastseen.core.config.models import LastSeenConfig
from lastseen.core.config.paths import ConfigFsPaths
from lastseen.core.errors import ConfigError


class ConfigManager:
    def __init__(self, *, fs: Optional[ConfigFsPaths] = None, logger=None, read_only: bool = False):
        self.fs = fs or ConfigFsPaths(".")
        self.logger = logger or logging.getLogger("lastseen")
        self.read_only = read_only
        self._cfg: Optional[LastSeenConfig] = None

    # ---------- public API ----------
    def load(self) -> LastSeenConfig:
        if not self.read_only:
            ensure_dirs(self.fs.config_dir, self.fs.data_dir)

        raw = self._load_raw()
        try:
            cfg = LastSeenConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigError("Invalid configuration file.", path=self.fs.app, errors=_error_summary(e)) from e
        self._cfg = cfg
        return cfg

    def get(self) -> LastSeenConfig:
        if self._cfg is None:
            return self.load()
        return self._cfg

    # ---------- internals ----------
    def _load_raw(self) -> Dict[str, Any]:
        rr = read_json_file(self.fs.app)
        if rr.ok:
            return rr.data
        if rr.error == "missing":
            defaults = LastSeenConfig().model_dump()
            if not self.read_only:
                atomic_write_json(self.fs.app, defaults)
                self.logger.info(f"Wrote default config to {self.fs.app}")
            return defaults
        # unreadable or corrupt: keep a copy for the operator, continue with defaults
        self.logger.warning(f"Config file unreadable ({rr.error}); using defaults.")
        if not self.read_only:
            moved = move_aside_corrupt(self.fs.app, self.fs.backups_dir)
            if moved:
                self.logger.warning(f"Moved corrupt config to {moved}")
            atomic_write_json(self.fs.app, LastSeenConfig().model_dump())
        return LastSeenConfig().model_dump()


def _error_summary(e: ValidationError) -> list[str]:
    out = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc") or ())
        out.append(f"{loc}: {err.get('msg')}")
    return out
