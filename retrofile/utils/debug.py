"""Opt-in trace output for the conversion pipeline.

Tracing is off unless ``RETROFILE_DEBUG`` names one or more categories,
separated by commas (``RETROFILE_DEBUG=hex,store``). The value ``all``
turns every category on. The categories used by the package are:

``hex``
    one line per decoded Intel HEX record
``store``
    range creation, prepend/append and merges in the memory image
``pap``
    paper tape record counts
``session``
    per-file load and output summaries

The variable is read once. Tests that change it call
:func:`reset_debug_categories` afterwards.
"""

from __future__ import annotations

import os
from functools import lru_cache

DEBUG_ENV_VAR = "RETROFILE_DEBUG"
ALL_CATEGORIES = "all"


@lru_cache(maxsize=1)
def _active_categories() -> frozenset[str]:
    raw = os.environ.get(DEBUG_ENV_VAR, "")
    return frozenset(name.strip().lower() for name in raw.split(",") if name.strip())


def reset_debug_categories() -> None:
    _active_categories.cache_clear()


def debug_enabled(category: str | None = None) -> bool:
    """Return whether ``category`` is traced; with no category, whether any is."""

    active = _active_categories()
    if category is None or ALL_CATEGORIES in active:
        return bool(active)
    return category.lower() in active


def debug_log(category: str, message: str, *args) -> None:
    """Print ``message % args`` tagged with ``category`` when it is traced.

    Formatting is deferred until the category is known to be on. Arguments
    that do not fit the format string are shown after the raw message.
    """

    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[RETROFILE][{category}] {message}")
