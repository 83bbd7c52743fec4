"""
tiny-lru: a least-recently-used cache with optional per-entry TTL.

>>> from tiny_lru import lru
>>> cache = lru(100, ttl=5000)
>>> cache.set("key", "value").get("key")
'value'
"""

from .__version__ import __version__
from .config.models import CacheConfig, EnvSettings, InvalidConfigError
from .lru import LRU, NEVER_EXPIRES, CacheEntry, lru
from .observability import setup_logging

__all__ = [
    "__version__",
    "LRU",
    "CacheEntry",
    "CacheConfig",
    "EnvSettings",
    "InvalidConfigError",
    "NEVER_EXPIRES",
    "lru",
    "setup_logging",
]
