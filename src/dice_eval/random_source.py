"""Process-wide uniform integer source.

The default source draws from the operating system CSPRNG. Tests and
reproducible runs can install another source with set_source() or the
use_source() context manager.
"""
from __future__ import annotations

import logging
import random
import secrets
import threading
from contextlib import contextmanager
from typing import Iterator, Protocol

from dice_eval.errors import InternalError

logger = logging.getLogger(__name__)

_SEED_MASK = (1 << 64) - 1


class Source(Protocol):
    def uniform_int(self, n: int) -> int: ...

    def seed(self, value: int) -> None: ...


class SystemSource:
    """Cryptographic source backed by secrets.randbelow. Seeding is a no-op."""

    def uniform_int(self, n: int) -> int:
        try:
            return secrets.randbelow(n)
        except OSError as exc:
            raise InternalError(f"system random source failed: {exc}") from exc

    def seed(self, value: int) -> None:
        logger.debug("Ignoring seed %d for system random source.", value)


class SeededSource:
    """Deterministic source for reproducible rolls. Seeds are taken mod 2**64."""

    def __init__(self, seed: int = 0):
        self._lock = threading.Lock()
        self._rng = random.Random(seed & _SEED_MASK)

    def uniform_int(self, n: int) -> int:
        with self._lock:
            return self._rng.randrange(n)

    def seed(self, value: int) -> None:
        with self._lock:
            self._rng.seed(value & _SEED_MASK)


_lock = threading.Lock()
_source: Source = SystemSource()


def uniform_int(n: int) -> int:
    """Return a uniformly distributed integer in [0, n)."""
    if n <= 0:
        raise ValueError(f"uniform_int requires n > 0, got {n}")
    with _lock:
        return _source.uniform_int(n)


def seed(value: int) -> None:
    with _lock:
        _source.seed(value)


def get_source() -> Source:
    return _source


def set_source(source: Source) -> Source:
    """Install a new global source. Returns the previous one."""
    global _source
    with _lock:
        previous, _source = _source, source
    return previous


@contextmanager
def use_source(source: Source) -> Iterator[Source]:
    previous = set_source(source)
    try:
        yield source
    finally:
        set_source(previous)
