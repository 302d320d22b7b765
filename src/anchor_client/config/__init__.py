"""Configuration module for Anchor Client."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
