"""Config models and loader.

This module defines Pydantic models for file- and environment-based
configuration of caches built by :func:`lrucache.cache.build_cache` and the
replay CLI.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CAPACITY = 128


class CacheConfig(BaseModel):
    """Configuration for a single cache.

    Attributes
    ----------
    capacity: int
        Maximum number of distinct keys retained. Must be at least 1.
    """

    capacity: int = Field(
        DEFAULT_CAPACITY, ge=1, strict=True, description="Maximum entries"
    )


class AppConfig(BaseModel):
    """Top-level application configuration.

    Attributes
    ----------
    cache: CacheConfig
        Settings for the cache instance.
    """

    cache: CacheConfig = Field(default_factory=CacheConfig)

    @staticmethod
    def load(path: Path) -> "AppConfig":
        """Load application config from a JSON file."""
        raw = path.read_bytes()
        data = json.loads(raw.decode("utf-8"))
        return AppConfig.model_validate(data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    capacity: Optional[int]
        Cache capacity used when neither the CLI nor a config file sets one.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LRUCACHE_")

    log_level: str = Field("INFO")
    capacity: Optional[int] = Field(
        None,
        ge=1,
        description="Default cache capacity",
    )
