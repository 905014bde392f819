"""Mutual exclusion keyed by name.

A :class:`NameLocks` instance hands out one lock per name on demand. Threads
that ask for a name that is already held wait until it is released. The
entry for a name is dropped as soon as nobody holds it or waits for it.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class _Entry:
    """Per-name lock and the number of threads holding or waiting for it."""

    __slots__ = ("lock", "in_use")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.in_use = 0


def _check_name(name: object, caller: str) -> str:
    if not isinstance(name, str) or not name:
        raise ValueError(f"{caller}: invalid name {name!r}")
    return name


class NameLocks:
    """A table of locks, one for each name currently in use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: Dict[str, _Entry] = {}

    def acquire(self, name: str) -> None:
        """Lock ``name``, waiting while another holder has it."""
        _check_name(name, "acquire")
        with self._guard:
            entry = self._entries.get(name)
            if entry is None:
                entry = _Entry()
                self._entries[name] = entry
            entry.in_use += 1
        entry.lock.acquire()

    def release(self, name: str) -> None:
        """Unlock ``name``; raise KeyError if it is not in use."""
        _check_name(name, "release")
        with self._guard:
            entry = self._entries.get(name)
            if entry is None:
                raise KeyError(f"release: entry for {name} does not exist")
            entry.in_use -= 1
            if not entry.in_use:
                del self._entries[name]
        entry.lock.release()

    @contextmanager
    def hold(self, name: str) -> Iterator[str]:
        """Hold the lock for ``name`` for the duration of a ``with`` block."""
        self.acquire(name)
        try:
            yield name
        finally:
            self.release(name)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def __contains__(self, name: object) -> bool:
        with self._guard:
            return name in self._entries