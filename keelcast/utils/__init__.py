"""Utility functions and helpers."""

from keelcast.utils.cache import ExpiringCache, build_popularity_cache
from keelcast.utils.config_loader import load_app_config, load_yaml_config
from keelcast.utils.logging import get_logger, setup_logging
from keelcast.utils.urls import is_absolute_url, path_and_query

__all__ = [
    "ExpiringCache",
    "build_popularity_cache",
    "setup_logging",
    "get_logger",
    "load_yaml_config",
    "load_app_config",
    "is_absolute_url",
    "path_and_query",
]
