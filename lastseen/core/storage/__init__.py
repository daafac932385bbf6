"""
Last-seen time stamp storage: a YAML-backed map with debounced,
single-flight background saves.
"""

from lastseen.core.storage.coordinator import SaveCoordinator
from lastseen.core.storage.executor import BackgroundExecutor
from lastseen.core.storage.store import TimestampStore

__all__ = ["BackgroundExecutor", "SaveCoordinator", "TimestampStore"]
