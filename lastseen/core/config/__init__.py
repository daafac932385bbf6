from __future__ import annotations

from lastseen.core.config.manager import ConfigManager
from lastseen.core.config.models import LastSeenConfig
from lastseen.core.config.paths import ConfigFsPaths

__all__ = ["ConfigFsPaths", "ConfigManager", "LastSeenConfig"]
