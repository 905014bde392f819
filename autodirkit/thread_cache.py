"""A pool of reusable worker threads fed through a bounded FIFO.

New work either goes to a fresh thread or, when enough idle workers are
waiting, into a FIFO that those workers drain. Each worker handles a
limited number of items before it retires, and only a limited number of
idle workers are kept waiting at any time.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Any, Callable, Deque, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_REUSE = 300
_STOP_ROUNDS = 3
_START_RETRY_DELAY = 0.1


class ThreadCache:
    """Runs ``callback(item)`` for each submitted item on cached threads."""

    def __init__(
        self,
        callback: Callable[[Any], None],
        n_slots: int,
        max_thread_wait: int,
        max_reuse: int = DEFAULT_MAX_REUSE,
    ) -> None:
        if n_slots < 1:
            raise ValueError(f"n_slots must be at least 1, got {n_slots}")
        if max_thread_wait < 0:
            raise ValueError(f"max_thread_wait must not be negative, got {max_thread_wait}")
        if max_reuse < 0:
            raise ValueError(f"max_reuse must not be negative, got {max_reuse}")
        self._callback = callback
        self._n_slots = n_slots
        self._max_thread_wait = max_thread_wait
        self._max_reuse = max_reuse

        self._lock = threading.Lock()
        self._count_cond = threading.Condition(self._lock)
        self._waiting_cond = threading.Condition(self._lock)
        self._slots: Deque[Any] = deque()
        self._stopping = False
        self._thread_count = 0
        self._thread_waiting = 0

    # -- public API -------------------------------------------------------

    def submit(self, item: Any) -> None:
        """Hand ``item`` to an idle worker or to a newly started thread."""
        with self._lock:
            buffer_full = len(self._slots) >= self._n_slots
            needs_thread = (
                not self._thread_waiting
                or buffer_full
                or len(self._slots) > self._thread_waiting
            )
        if needs_thread:
            if self._try_start(item):
                return
            with self._lock:
                force = not self._thread_waiting or len(self._slots) >= self._n_slots
            if force:
                self._start_until_success(item)
                return
        with self._lock:
            self._slots.append(item)
            self._waiting_cond.notify()

    def stop(self) -> None:
        """Ask every worker to finish and wait a few seconds for them."""
        with self._lock:
            self._stopping = True
            for attempt in range(_STOP_ROUNDS):
                if not self._thread_count:
                    break
                self._waiting_cond.notify_all()
                self._count_cond.wait(timeout=2 * attempt + 1)
            if self._thread_count:
                logger.debug("thread cache: %d threads still running", self._thread_count)

    def thread_count(self) -> int:
        """Number of worker threads currently alive."""
        with self._lock:
            return self._thread_count

    def threads_waiting(self) -> int:
        """Number of idle workers waiting for new items."""
        with self._lock:
            return self._thread_waiting

    def pending(self) -> int:
        """Number of items queued in the FIFO and not yet taken."""
        with self._lock:
            return len(self._slots)

    def __enter__(self) -> "ThreadCache":
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()

    # -- internals --------------------------------------------------------

    def _try_start(self, item: Any) -> bool:
        with self._lock:
            self._thread_count += 1
        thread = threading.Thread(target=self._worker, args=(item,), daemon=True)
        try:
            thread.start()
        except RuntimeError:
            with self._lock:
                self._thread_count -= 1
            return False
        return True

    def _start_until_success(self, item: Any) -> None:
        while not self._try_start(item):
            logger.warning("thread cache: could not start thread, retrying")
            time.sleep(_START_RETRY_DELAY)

    def _next_item(self) -> Optional[Any]:
        """Take the next queued item, or retire this worker and return None."""
        with self._lock:
            while True:
                if self._slots:
                    return self._slots.popleft()
                if self._stopping or self._thread_waiting >= self._max_thread_wait:
                    self._retire_locked()
                    return None
                self._thread_waiting += 1
                try:
                    self._waiting_cond.wait()
                finally:
                    self._thread_waiting -= 1

    def _retire_locked(self) -> None:
        self._thread_count -= 1
        if self._stopping and not self._thread_count:
            self._count_cond.notify_all()

    def _run(self, item: Any) -> None:
        try:
            self._callback(item)
        except Exception:
            logger.exception("thread cache: callback failed")

    def _worker(self, item: Any) -> None:
        served = 0
        while True:
            self._run(item)
            served += 1
            if served > self._max_reuse:
                break
            item = self._next_item()
            if item is None:
                return
        with self._lock:
            self._retire_locked()