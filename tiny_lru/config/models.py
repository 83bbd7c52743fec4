"""Config models and loader.

This module defines the Pydantic models that validate cache parameters, plus
file- and environment-based loading. JSON parsing prefers `orjson` when it is
installed and otherwise uses the standard library's `json` module.
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Any, Callable, Optional

try:
    import orjson as _orjson_mod  # type: ignore[assignment]
except ImportError:  # pragma: no cover - optional dependency
    _orjson_mod = None  # type: ignore[assignment]
    _loads_orjson: Optional[Callable[[bytes], Any]] = None
else:

    def _loads_orjson(buf: bytes) -> Any:
        loader = getattr(_orjson_mod, "loads")  # type: ignore[assignment]
        return loader(buf)


from pydantic import BaseModel, Field, StrictBool
from pydantic_settings import BaseSettings, SettingsConfigDict


class InvalidConfigError(ValueError):
    """Raised when a cache is constructed with invalid parameters."""


class CacheConfig(BaseModel):
    """Validated cache construction parameters.

    Attributes
    ----------
    max: int
        Capacity bound; 0 means unbounded.
    ttl: int
        Default entry lifetime in milliseconds; 0 means never expires.
    reset_ttl: bool
        Whether reads and updates refresh an entry's expiry.
    """

    max: int = Field(0, ge=0, description="Maximum number of entries")
    ttl: int = Field(0, ge=0, description="Entry lifetime in milliseconds")
    reset_ttl: StrictBool = Field(
        False, description="Refresh expiry on get and on set of existing keys"
    )

    @staticmethod
    def load(path: Path) -> "CacheConfig":
        """Load cache config from a JSON file.

        Unknown keys are ignored; missing keys take their defaults.
        """
        raw = path.read_bytes()
        if _loads_orjson is not None:
            data = _loads_orjson(raw)
        else:
            data = _json.loads(raw.decode("utf-8"))
        return CacheConfig.model_validate(data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    max: int
        Default capacity for caches built from the environment. Defaults to
        1000.
    ttl: int
        Default entry lifetime in milliseconds. Defaults to 0.
    reset_ttl: bool
        Default refresh-on-access behavior. Defaults to False.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="TINY_LRU_")

    log_level: str = Field("INFO")
    max: int = Field(1000, ge=0)
    ttl: int = Field(0, ge=0)
    reset_ttl: bool = Field(False)

    def cache_config(self) -> CacheConfig:
        """Return the cache parameters as a :class:`CacheConfig`."""
        return CacheConfig(max=self.max, ttl=self.ttl, reset_ttl=self.reset_ttl)
