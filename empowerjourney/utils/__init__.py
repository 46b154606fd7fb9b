"""Empower Journey utilities."""

from .settings import Settings, load_settings, read_settings_file

__all__ = [
    "Settings",
    "load_settings",
    "read_settings_file",
]
