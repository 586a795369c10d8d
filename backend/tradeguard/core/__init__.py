"""Core configuration and logging setup."""

from tradeguard.core.config import Settings, get_settings, settings
from tradeguard.core.logging import configure_logging

__all__ = ["Settings", "get_settings", "settings", "configure_logging"]
