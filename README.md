# autodirkit

Small concurrency building blocks for services that create and manage
directories on demand:

- `autodirkit.workon.NameLocks`: mutual exclusion keyed by string names.
  Work on the name `"alice"` is serialised, while work on `"bob"` can go
  ahead at the same time.
- `autodirkit.thread_cache.ThreadCache`: runs a callback for each submitted
  item on worker threads, keeping idle threads around for reuse and feeding
  them through a bounded FIFO.
- `autodirkit.time_mono`: whole-second timestamps, deadlines for timed
  waits and short sleeps.

The package has no dependencies outside the standard library.

## Install

```
pip install autodirkit
```

## Per-name locks

```python
from autodirkit.workon import NameLocks

locks = NameLocks()

with locks.hold("alice"):
    ...  # only one thread works on "alice" at a time

locks.acquire("bob")
try:
    ...
finally:
    locks.release("bob")
```

- `acquire(name)` blocks while another thread holds `name`.
- `release(name)` raises `KeyError` if `name` is not in use.
- Both raise `ValueError` for an empty name or one that is not a string.
- `hold(name)` is a context manager that acquires and releases for you.

An entry lives only while some thread holds or waits for the name.
`len(locks)` gives the number of live names and `"bob" in locks` checks for
one.

## Worker thread cache

```python
from autodirkit.thread_cache import ThreadCache

def handle(item):
    print("working on", item)

with ThreadCache(handle, n_slots=300, max_thread_wait=30, max_reuse=300) as cache:
    for n in range(10):
        cache.submit(n)
```

Each submitted item is passed to the callback on a worker thread. If enough
idle workers are waiting, the item goes into the FIFO for them; otherwise a
new thread is started for it.

- `n_slots` (at least 1) is the size of the hand-off FIFO.
- `max_thread_wait` limits how many idle threads are kept waiting for work;
  a worker that finds nothing to do beyond that limit exits.
- `max_reuse` (default 300) limits how many further items one thread takes
  after its first before it exits.

Invalid sizes raise `ValueError`. An exception raised by the callback is
logged through the `autodirkit.thread_cache` logger and does not stop the
worker.

`stop()` tells workers to exit and waits for them in three rounds of 1, 3
and 5 seconds at most; threads still running after that are left to finish
on their own (they are daemon threads). Leaving the `with` block calls
`stop()`. `thread_count()`, `threads_waiting()` and `pending()` report the
number of live workers, idle workers and queued items.

## Monotonic time

```python
from autodirkit import time_mono

time_mono.time_mono_init()
start = time_mono.time_mono()          # whole seconds
deadline = time_mono.cond_deadline(5)  # clock reading 5 s from now
time_mono.mono_nanosleep(100_000_000)  # sleep 0.1 s
```

Until `time_mono_init()` is called the functions read the wall clock; after
it they read the monotonic clock. Calling it again does nothing.
`cond_deadline()` returns a float on the same clock as `time_mono()`.
`mono_nanosleep()` accepts 0 up to, but not including, one second in
nanoseconds and raises `ValueError` otherwise.

## What this package does not do

It is a library of building blocks only. It does not mount, create or
expire directories itself, does not talk to any kernel automount
interface, and installs no command or service.

## Running the tests

```
pip install autodirkit[test]
pytest
```