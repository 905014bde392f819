import threading
import time

import pytest

from autodirkit.thread_cache import ThreadCache


class Collector:
    def __init__(self, delay=0.0):
        self.items = []
        self.threads = set()
        self.delay = delay
        self._cond = threading.Condition()

    def __call__(self, item):
        if self.delay:
            time.sleep(self.delay)
        with self._cond:
            self.items.append(item)
            self.threads.add(threading.get_ident())
            self._cond.notify_all()

    def wait_for(self, count, timeout=10.0):
        with self._cond:
            return self._cond.wait_for(lambda: len(self.items) >= count, timeout)


def wait_until(predicate, timeout=10.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_every_item_is_processed_once():
    collector = Collector()
    cache = ThreadCache(collector, 16, 4, 300)
    for value in range(200):
        cache.submit(value)
    assert collector.wait_for(200)
    cache.stop()
    assert sorted(collector.items) == list(range(200))


def test_stop_waits_for_all_threads():
    collector = Collector(delay=0.01)
    cache = ThreadCache(collector, 8, 3, 300)
    for value in range(20):
        cache.submit(value)
    assert collector.wait_for(20)
    cache.stop()
    assert cache.thread_count() == 0
    assert cache.threads_waiting() == 0


def test_context_manager_stops_workers():
    collector = Collector()
    with ThreadCache(collector, 4, 2, 300) as cache:
        for value in range(10):
            cache.submit(value)
        assert collector.wait_for(10)
    assert cache.thread_count() == 0


def test_idle_workers_are_bounded_by_max_thread_wait():
    collector = Collector()
    cache = ThreadCache(collector, 8, 2, 300)
    for value in range(30):
        cache.submit(value)
    assert collector.wait_for(30)
    assert wait_until(lambda: cache.thread_count() <= 2)
    assert cache.threads_waiting() <= 2
    cache.stop()
    assert cache.thread_count() == 0


def test_no_waiting_workers_all_threads_exit():
    collector = Collector()
    cache = ThreadCache(collector, 4, 0, 300)
    for value in range(10):
        cache.submit(value)
    assert collector.wait_for(10)
    assert wait_until(lambda: cache.thread_count() == 0)
    assert cache.threads_waiting() == 0


def test_idle_worker_is_reused():
    collector = Collector()
    cache = ThreadCache(collector, 4, 1, 300)
    cache.submit("first")
    assert collector.wait_for(1)
    assert wait_until(lambda: cache.threads_waiting() == 1)
    cache.submit("second")
    assert collector.wait_for(2)
    cache.stop()
    assert collector.items == ["first", "second"]
    assert len(collector.threads) == 1


def test_worker_retires_after_max_reuse():
    collector = Collector()
    cache = ThreadCache(collector, 4, 1, 0)
    cache.submit("a")
    assert collector.wait_for(1)
    assert wait_until(lambda: cache.thread_count() == 0)
    cache.submit("b")
    assert collector.wait_for(2)
    cache.stop()
    assert cache.thread_count() == 0


def test_pending_is_empty_after_processing():
    collector = Collector()
    cache = ThreadCache(collector, 4, 2, 300)
    assert cache.pending() == 0
    for value in range(12):
        cache.submit(value)
    assert collector.wait_for(12)
    assert cache.pending() == 0
    cache.stop()


def test_failing_callback_does_not_leak_threads():
    seen = []

    def callback(item):
        seen.append(item)
        raise RuntimeError("boom")

    cache = ThreadCache(callback, 4, 0, 300)
    cache.submit(1)
    cache.submit(2)
    wait_until(lambda: len(seen) == 2 and cache.thread_count() == 0)
    assert sorted(seen) == [1, 2]
    assert cache.thread_count() == 0
    assert cache.threads_waiting() == 0
    assert cache.pending() == 0


@pytest.mark.parametrize(
    "n_slots, max_thread_wait, max_reuse",
    [(0, 1, 1), (-3, 1, 1), (4, -1, 1), (4, 1, -1)],
)
def test_invalid_arguments_raise(n_slots, max_thread_wait, max_reuse):
    with pytest.raises(ValueError):
        ThreadCache(lambda item: None, n_slots, max_thread_wait, max_reuse)