"""Second-resolution timestamps and short sleeps on a monotonic clock.

Until :func:`time_mono_init` has been called the wall clock is used; after
that, the monotonic clock is used so that timeouts are not affected by
changes to the system time.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

NANOSECONDS_PER_SECOND = 1_000_000_000

_clock: Callable[[], float] = time.time
_initialized = False
_init_lock = threading.Lock()


def time_mono_init() -> None:
    """Switch to the monotonic clock. Calling it again does nothing."""
    global _clock, _initialized
    with _init_lock:
        if _initialized:
            return
        _clock = time.monotonic
        # Read the clock once so that any failure shows up at start-up.
        time_mono()
        _initialized = True


def time_mono() -> int:
    """Return the current time of the selected clock in whole seconds."""
    return int(_clock())


def cond_deadline(sec: float) -> float:
    """Return the clock reading ``sec`` seconds from now.

    The value is on the same clock as :func:`time_mono`, so it can be used
    as an absolute deadline for condition waits.
    """
    return _clock() + sec


def mono_nanosleep(nsec: int) -> None:
    """Sleep for ``nsec`` nanoseconds, which must be below one second."""
    if not 0 <= nsec < NANOSECONDS_PER_SECOND:
        raise ValueError(
            f"mono_nanosleep: nanoseconds must be in [0, {NANOSECONDS_PER_SECOND}), got {nsec}"
        )
    time.sleep(nsec / NANOSECONDS_PER_SECOND)