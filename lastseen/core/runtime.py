from __future__ import annotations

import logging
import queue
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, List, Optional, Tuple

from lastseen.core.commands import Reply
from lastseen.core.lastseen_app import LastSeenApp

_WorkItem = Tuple[Callable[..., Any], Tuple[Any, ...], Future]


class LastSeenRuntime:
    """
    Runs a LastSeenApp on one dedicated thread.

    Callers on any thread post work and get a Future back; the runtime thread
    executes it in order. Autosave fires on the same thread, so the storage
    only ever sees a single foreground caller.
    """

    def __init__(
        self,
        app: LastSeenApp,
        *,
        autosave_interval_seconds: float,
        logger=None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.app = app
        self.interval = max(0.01, float(autosave_interval_seconds))
        self.logger = logger or logging.getLogger("lastseen")
        self.clock = clock
        self._q: "queue.Queue[Optional[_WorkItem]]" = queue.Queue()
        self._thread = threading.Thread(target=self._run, name="lastseen-runtime", daemon=True)
        self._stopping = threading.Event()

    # ---------- Public control surface ----------
    def start(self) -> Future:
        if not self._thread.is_alive():
            self._thread.start()
        return self.post(self.app.on_enable)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Run on_disable on the runtime thread, then let it exit."""
        if self._stopping.is_set():
            return
        self._stopping.set()
        self._q.put(None)
        if self._thread.is_alive():
            self._thread.join(timeout=timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def post(self, fn: Callable[..., Any], *args: Any) -> Future:
        if self._stopping.is_set():
            raise RuntimeError("runtime is stopping")
        fut: Future = Future()
        self._q.put((fn, args, fut))
        return fut

    def player_join(self, name: str) -> Future:
        return self.post(self.app.on_player_join, name)

    def player_quit(self, name: str) -> Future:
        return self.post(self.app.on_player_quit, name)

    def command(self, command: str, args: List[str]) -> "Future[List[Reply]]":
        return self.post(self.app.on_command, command, list(args))

    def online(self) -> "Future[List[str]]":
        return self.post(self.app.online_players)

    def save(self) -> Future:
        return self.post(self.app.save)

    # ---------- Runtime thread ----------
    def _run(self) -> None:
        next_autosave = self.clock() + self.interval
        while True:
            wait = max(0.0, next_autosave - self.clock())
            try:
                item = self._q.get(timeout=wait)
            except queue.Empty:
                self._autosave()
                next_autosave = self.clock() + self.interval
                continue
            if item is None:
                break
            fn, args, fut = item
            if not fut.set_running_or_notify_cancel():
                continue
            try:
                fut.set_result(fn(*args))
            except Exception as e:  # noqa: BLE001
                self.logger.error(f"Runtime task failed: {e}")
                fut.set_exception(e)
        try:
            self.app.on_disable()
        except Exception as e:  # noqa: BLE001
            self.logger.error(f"Shutdown save failed: {e}")

    def _autosave(self) -> None:
        try:
            self.app.autosave()
        except Exception as e:  # noqa: BLE001
            self.logger.error(f"Autosave failed: {e}")
