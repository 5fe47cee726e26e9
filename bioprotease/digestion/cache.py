"""
Result caching for the digestion engine.

Results of the scanning operations (``digest``, ``cleavage_sites``,
``is_substrate``) are pure functions of the specificity and the sequence, so
they can be memoized per engine. Two backends are available:

- ``MemoryResultCache``: bounded LRU held by the engine instance; the
  default. Lives and dies with the engine.
- ``DiskResultCache``: persistent ``diskcache.Cache`` shared between
  processes, keyed by the specificity's ``cache_token``. Only usable for
  rules that can be identified outside the process (named or pattern
  specificities).

Both guarantee that concurrent callers asking for the same key trigger a
single computation. Cached values are stored as immutable tuples; the engine
hands out fresh lists built from them.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, Callable, Hashable, Optional

from diskcache import Cache

from ..core.sequence import sequence_hash

logger = logging.getLogger(__name__)

_MISSING = object()


class ResultCache(ABC):
    """
    Memoizes engine results keyed by (operation, sequence).

    Subclasses provide storage through ``_load``/``_store``; this class
    handles hit/miss accounting and per-key locking.
    """

    def __init__(self):
        self._locks: dict[Hashable, list] = {}
        self._guard = threading.Lock()
        self.hits = 0
        self.misses = 0

    @abstractmethod
    def make_key(self, operation: str, sequence: str) -> Hashable:
        """Build the storage key for an operation on a sequence."""
        pass

    @abstractmethod
    def _load(self, key: Hashable) -> Any:
        """Return the stored value or ``_MISSING``."""
        pass

    @abstractmethod
    def _store(self, key: Hashable, value: Any) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every cached result."""
        pass

    def get_or_compute(
        self,
        operation: str,
        sequence: str,
        compute: Callable[[], Any],
    ) -> Any:
        """
        Return the cached result, computing and storing it on a miss.

        Args:
            operation: Name of the engine operation
            sequence: Normalized sequence
            compute: Zero-argument callable producing an immutable value

        Returns:
            The cached or freshly computed value
        """
        key = self.make_key(operation, sequence)

        value = self._load(key)
        if value is not _MISSING:
            self._count(hit=True)
            return value

        entry = self._enter(key)
        try:
            with entry[0]:
                # Another thread may have filled the slot while we waited
                value = self._load(key)
                if value is not _MISSING:
                    self._count(hit=True)
                    return value

                self._count(hit=False)
                value = compute()
                self._store(key, value)
        finally:
            self._leave(key, entry)

        return value

    def stats(self) -> dict[str, int]:
        """Hit and miss counters."""
        with self._guard:
            return {"hits": self.hits, "misses": self.misses}

    def close(self) -> None:
        """Release resources held by the backend."""
        pass

    def _enter(self, key: Hashable) -> list:
        # Entry is [lock, number of threads holding or waiting for it]
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
            return entry

    def _leave(self, key: Hashable, entry: list) -> None:
        with self._guard:
            entry[1] -= 1
            if entry[1] == 0:
                self._locks.pop(key, None)

    def _count(self, hit: bool) -> None:
        with self._guard:
            if hit:
                self.hits += 1
            else:
                self.misses += 1


class MemoryResultCache(ResultCache):
    """Bounded in-memory LRU cache owned by a single engine."""

    def __init__(self, maxsize: int = 1024):
        super().__init__()
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self._data: OrderedDict[Hashable, Any] = OrderedDict()
        self._data_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._data)

    def make_key(self, operation: str, sequence: str) -> Hashable:
        return (operation, sequence)

    def _load(self, key: Hashable) -> Any:
        with self._data_lock:
            if key not in self._data:
                return _MISSING
            self._data.move_to_end(key)
            return self._data[key]

    def _store(self, key: Hashable, value: Any) -> None:
        with self._data_lock:
            self._data[key] = value
            self._data.move_to_end(key)
            while len(self._data) > self.maxsize:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._data_lock:
            self._data.clear()


class DiskResultCache(ResultCache):
    """
    Persistent cache backed by ``diskcache``.

    Keys combine the specificity token, the operation and an MD5 hash of
    the sequence, so several engines with the same rule share entries.
    """

    def __init__(
        self,
        directory: Path,
        token: str,
        ttl: Optional[int] = None,
    ):
        super().__init__()
        self.directory = Path(directory)
        self.token = token
        self.ttl = ttl
        self._cache = Cache(str(self.directory))

    def make_key(self, operation: str, sequence: str) -> Hashable:
        return f"{self.token}:{operation}:{sequence_hash(sequence)}"

    def _load(self, key: Hashable) -> Any:
        return self._cache.get(key, default=_MISSING)

    def _store(self, key: Hashable, value: Any) -> None:
        self._cache.set(key, value, expire=self.ttl)

    def clear(self) -> None:
        """Drop this rule's entries; other rules sharing the directory are kept."""
        prefix = f"{self.token}:"
        for key in list(self._cache.iterkeys()):
            if isinstance(key, str) and key.startswith(prefix):
                self._cache.delete(key)

    def close(self) -> None:
        self._cache.close()


def build_cache(config, specificity) -> Optional[ResultCache]:
    """
    Create the cache described by an engine configuration.

    Args:
        config: ProteaseConfig
        specificity: The engine's Specificity

    Returns:
        A ResultCache, or None when caching is disabled
    """
    if not config.use_cache:
        return None

    if config.cache_backend == "disk":
        token = specificity.cache_token
        if token is not None:
            return DiskResultCache(config.cache_dir, token, ttl=config.cache_ttl)
        logger.warning(
            f"{specificity.name}: rule cannot be persisted, using in-memory cache"
        )

    return MemoryResultCache(maxsize=config.cache_size)
