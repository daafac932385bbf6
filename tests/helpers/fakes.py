from __future__ import annotations

import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable, List

from lastseen.core.storage.io import atomic_write_text


class FakeClock:
    """Epoch-millis clock for LastSeenApp / CommandHandler."""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self._t = int(start_ms)

    def __call__(self) -> int:
        return self._t

    def advance(self, ms: int) -> None:
        self._t += int(ms)


@dataclass
class RecordingWriter:
    """
    Stand-in for atomic_write_text that records every write. When gated, a
    write blocks until release() so a background save can be held open.
    """

    gated: bool = False
    fail: bool = False
    fail_count: int = 0
    texts: List[str] = field(default_factory=list)
    threads: List[str] = field(default_factory=list)
    active: int = 0
    max_active: int = 0

    def __post_init__(self) -> None:
        self.started = threading.Event()
        self._gate = threading.Event()
        self._lock = threading.Lock()
        if not self.gated:
            self._gate.set()

    def release(self) -> None:
        self._gate.set()

    def __call__(self, path: str, text: str) -> None:
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            self.threads.append(threading.current_thread().name)
        self.started.set()
        try:
            assert self._gate.wait(timeout=5.0), "gate never released"
            if self.fail or self.fail_count > 0:
                self.fail_count = max(0, self.fail_count - 1)
                from lastseen.core.errors import StorageIOError

                raise StorageIOError(f"Cannot write {path}: disk full", path=path)
            self.texts.append(text)
            atomic_write_text(path, text)
        finally:
            with self._lock:
                self.active -= 1


class ManualExecutor:
    """
    BackgroundExecutor replacement handing out pending futures that the test
    completes by hand.
    """

    def __init__(self) -> None:
        self.futures: List[Future] = []
        self.jobs: List[Callable[..., Any]] = []
        self.is_shutdown = False

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        fut: Future = Future()
        self.jobs.append(fn)
        self.futures.append(fut)
        return fut

    def shutdown(self, *, wait: bool = True) -> None:
        self.is_shutdown = True
