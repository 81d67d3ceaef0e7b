"""
Poll scheduler: call a function on a fixed period until stopped.

The timer runs on its own daemon thread and hands each tick to a small
worker pool, so a slow callback never delays the next tick.  Ticks may
therefore overlap; callers that care about ordering (the dashboard
controller does) must tag their work with sequence numbers.

Usage::

    with PollScheduler(controller.refresh, interval=5.0):
        ...                     # polling while inside the block
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

logger = logging.getLogger(__name__)


class PollScheduler:
    """Fixed-interval poller with an explicit start/stop lifecycle."""

    def __init__(self, callback: Callable[[], object], interval: float = 5.0,
                 max_workers: int = 2, name: str = "voter-poll") -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.callback = callback
        self.interval = interval
        self.max_workers = max_workers
        self.name = name
        self.ticks = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start ticking; the first tick fires one interval from now."""
        with self._lock:
            if self.running:
                return
            self._stop.clear()
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix=f"{self.name}-worker"
            )
            self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
            self._thread.start()
        logger.debug("%s started (interval=%.1fs)", self.name, self.interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop ticking and release the timer thread and worker pool.

        Ticks already running are not interrupted; queued ones are cancelled.
        """
        with self._lock:
            self._stop.set()
            thread, executor = self._thread, self._executor
            self._thread, self._executor = None, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)
        logger.debug("%s stopped after %d ticks", self.name, self.ticks)

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self._dispatch()

    def _dispatch(self) -> None:
        executor = self._executor
        if executor is None or self._stop.is_set():
            return
        self.ticks += 1
        try:
            executor.submit(self._invoke)
        except RuntimeError:
            # executor shut down between the check and the submit
            return

    def _invoke(self) -> None:
        try:
            self.callback()
        except Exception:
            logger.exception("%s tick failed", self.name)

    def __enter__(self) -> "PollScheduler":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
