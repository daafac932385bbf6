from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import CancelledError, Future
from typing import Dict, Optional

from lastseen.core.errors import BackgroundTaskFailure, StorageIOError
from lastseen.core.storage.executor import BackgroundExecutor
from lastseen.core.storage.io import atomic_write_text, backup_corrupt, ensure_file
from lastseen.core.storage.store import TimestampStore


class SaveCoordinator:
    """
    Loads and stores last-seen time stamps in a YAML file.

    Time stamps are epoch milliseconds. The store behind this class is not
    thread-safe, so callers must use it from a single foreground thread.
    Saves may run on a dedicated background worker; the invariants are:

    - at most one background save exists at any instant;
    - set() waits for an in-flight save before mutating, so the store is
      read by the writer or mutated by the caller, never both at once.

    Storage errors are logged and never raised to callers.
    """

    def __init__(
        self,
        path: str,
        *,
        logger=None,
        debug: bool = False,
        executor: Optional[BackgroundExecutor] = None,
    ):
        self.path = path
        self.logger = logger or logging.getLogger("lastseen")
        self.debug = bool(debug)
        self._executor = executor or BackgroundExecutor()
        self._owns_executor = executor is None
        self._lock = threading.Lock()
        self._task: Optional[Future] = None
        self._backup_before_save = False
        self._store = self._load()

    # ---- reads ----
    @property
    def dirty(self) -> bool:
        return bool(self._store.dirty)

    def get(self, name: str) -> int:
        """
        Return the last-seen time stamp of name, or 0 if never seen.

        Never blocks. May lag a set() whose save is still in flight.
        """
        return self._store.get(name)

    def snapshot(self) -> Dict[str, int]:
        return self._store.snapshot()

    # ---- writes ----
    def set(self, name: str, millis: int) -> None:
        self.await_completion()
        try:
            self._store.set(name, millis)
        except ValueError as e:
            self.logger.warning(f"Ignoring last seen update for {name!r}: {e}")

    def save_async(self) -> bool:
        """
        Start a background save unless the store is clean or a save is
        already running. Returns True if a save was started.
        """
        if not self._store.dirty:
            return False
        with self._lock:
            # a save that just finished has already cleared dirty
            if not self._is_idle_locked() or not self._store.dirty:
                return False
            try:
                self._task = self._executor.submit(self._save_file)
            except RuntimeError as e:
                # executor already shut down
                self.logger.error(f"Cannot schedule save: {e}")
                return False
        return True

    def save_sync(self) -> None:
        """
        Make the store durable before returning.

        If a background save is in flight it already holds every mutation
        (set() waits for it), so only wait for it. Write here only if the
        store is dirty and no save covered it.
        """
        if not self._store.dirty:
            return
        if self.await_completion() and not self._store.dirty:
            return
        self._save_file()

    def close(self) -> None:
        self.save_sync()
        if self._owns_executor and not self._executor.is_shutdown:
            self._executor.shutdown(wait=True)

    # ---- single-flight state ----
    def is_idle(self) -> bool:
        with self._lock:
            return self._is_idle_locked()

    def await_completion(self) -> bool:
        """
        Block until any in-flight save finishes.

        Returns True if there was a save to wait for. A failed or cancelled
        save is logged, not raised. Always leaves the coordinator idle.
        """
        with self._lock:
            if self._is_idle_locked():
                return False
            task = self._task
        try:
            task.result()
        except CancelledError:
            self._log_task_failure(BackgroundTaskFailure("Save task was cancelled.", path=self.path))
        except Exception as e:  # noqa: BLE001
            self._log_task_failure(BackgroundTaskFailure(f"Unexpected async error: {e}", path=self.path, error=type(e).__name__))
        finally:
            with self._lock:
                if self._task is task:
                    self._task = None
        return True

    def _is_idle_locked(self) -> bool:
        if self._task is None:
            return True
        if self._task.done():
            self._task = None
            return True
        return False

    # ---- file ----
    def _load(self) -> TimestampStore:
        try:
            ensure_file(self.path)
        except StorageIOError as e:
            self.logger.error(f"Cannot create storage: {e.user_message}")
        start = time.monotonic()
        store = TimestampStore.from_file(self.path, logger=self.logger)
        # the unreadable file stays as-is until the first save copies it aside
        self._backup_before_save = bool(store.discarded_corrupt)
        if self.debug:
            self.logger.info(f"YAML loading elapsed time: {_elapsed_ms(start)}ms")
        return store

    def _save_file(self) -> bool:
        start = time.monotonic()
        if self.debug:
            self.logger.info("Saving last seen data.")
        try:
            text = self._store.serialize()
            if self._backup_before_save:
                moved = backup_corrupt(self.path)
                if moved:
                    self.logger.warning(f"Kept unreadable last seen file as {moved}")
                self._backup_before_save = False
            atomic_write_text(self.path, text)
        except StorageIOError as e:
            self.logger.error(f"Cannot save storage: {e.user_message}")
            return False
        except Exception as e:  # noqa: BLE001
            self.logger.error(f"Cannot save storage: {e}")
            return False
        self._store.mark_clean()
        if self.debug:
            self.logger.info(f"Saving elapsed time: {_elapsed_ms(start)}ms")
        return True

    def _log_task_failure(self, err: BackgroundTaskFailure) -> None:
        self.logger.error(f"{err.user_message} ({err.code})")


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
