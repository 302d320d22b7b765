"""Utility modules for Anchor Client."""

from .logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
