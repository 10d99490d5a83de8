"""Configuration module for the Roll-up Gate Quoting System."""

from rollup_quotes.config.settings import Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings"]
