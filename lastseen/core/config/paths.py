from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ConfigFsPaths:
    root: str = "."

    @property
    def config_dir(self) -> str:
        return os.path.join(self.root, "config")

    @property
    def data_dir(self) -> str:
        return os.path.join(self.root, "data")

    @property
    def backups_dir(self) -> str:
        return os.path.join(self.config_dir, "backups")

    # Files
    @property
    def app(self) -> str:
        return os.path.join(self.config_dir, "lastseen.json")

    def data_path(self, name: str) -> str:
        return os.path.join(self.data_dir, name)

    def log_dir(self, name: str) -> str:
        if os.path.isabs(name):
            return name
        return os.path.join(self.root, name)
