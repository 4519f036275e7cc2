"""Publisher feed ingestion package bootstrap."""

from .registry import FeedConfig, FeedRegistry, default_registry  # noqa: F401
from .settings import Settings, get_settings, reset_settings_cache  # noqa: F401

__all__ = [
    "FeedConfig",
    "FeedRegistry",
    "Settings",
    "default_registry",
    "get_settings",
    "reset_settings_cache",
]
