"""Per-name locks, a reusable worker-thread cache and monotonic time helpers."""

__version__ = "1.0.0"
__all__ = ["thread_cache", "time_mono", "workon"]