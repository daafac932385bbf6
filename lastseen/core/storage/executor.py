from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable


class BackgroundExecutor:
    """
    Single worker reserved for save jobs, so a save never queues behind
    unrelated long-running work in a shared pool.
    """

    def __init__(self, *, thread_name_prefix: str = "lastseen-save"):
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix=thread_name_prefix)
        self._shutdown = False

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        return self._pool.submit(fn, *args)

    def shutdown(self, *, wait: bool = True) -> None:
        self._shutdown = True
        self._pool.shutdown(wait=wait)
