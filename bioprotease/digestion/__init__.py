"""
Digestion engine and result caching.

Submodules:
    engine: ``Protease`` and its configuration and errors
    cache: Memory (LRU) and disk (diskcache) result caches
"""

from .cache import (
    DiskResultCache,
    MemoryResultCache,
    ResultCache,
    build_cache,
)
from .engine import (
    InvalidPosition,
    InvalidPositionWarning,
    Protease,
    ProteaseConfig,
    ProteaseError,
)

__all__ = [
    "Protease",
    "ProteaseConfig",
    "ProteaseError",
    "InvalidPosition",
    "InvalidPositionWarning",
    "ResultCache",
    "MemoryResultCache",
    "DiskResultCache",
    "build_cache",
]
