"""Configuration models for lrucache."""

from .models import DEFAULT_CAPACITY, AppConfig, CacheConfig, EnvSettings

__all__ = ["AppConfig", "CacheConfig", "DEFAULT_CAPACITY", "EnvSettings"]
