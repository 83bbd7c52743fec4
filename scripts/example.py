#!/usr/bin/env python3
"""
Usage example for tiny-lru.

Builds a small cache, stores two keys, reads one back, deletes it and reads
the other.

Usage:
    python scripts/example.py

Environment:
    TINY_LRU_LOG_LEVEL=DEBUG shows the cache's internal events.
"""

import logging
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tiny_lru import EnvSettings, lru, setup_logging  # noqa: E402

logger = logging.getLogger(__name__)


def main() -> int:
    """Run the example and return a process exit code."""
    settings = EnvSettings()  # type: ignore[call-arg]
    setup_logging(settings.log_level)

    cache = lru(5, 0)

    cache.set("myKey", "foo")
    cache.set("myKey2", "bar")

    print(cache.get("myKey"))

    cache.delete("myKey")

    print(cache.get("myKey2"))
    logger.debug("example.done", extra={"keys": cache.keys()})
    return 0


if __name__ == "__main__":
    sys.exit(main())
