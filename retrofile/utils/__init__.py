"""Utility helpers shared by the loaders, the image store and the writers."""

from .debug import DEBUG_ENV_VAR, debug_enabled, debug_log, reset_debug_categories

__all__ = [
    "DEBUG_ENV_VAR",
    "debug_enabled",
    "debug_log",
    "reset_debug_categories",
]
