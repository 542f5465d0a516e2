"""Retro file conversion utility.

Loads Intel HEX files into a sparse memory image and writes the image as MOS
Technology paper tape. ``run.py`` and the ``retrofile`` console script expose
the command-line front end in :mod:`retrofile.cli`.
"""

from __future__ import annotations

__version__ = "1.0"

from . import errors, formats, image, loader, system, utils, writer

__all__: list[str] = [
    "errors",
    "formats",
    "image",
    "loader",
    "system",
    "utils",
    "writer",
]
