"""WDC binary writer (not implemented yet)."""

from __future__ import annotations

from typing import BinaryIO

from retrofile.errors import UnsupportedFormatError
from retrofile.image import SegmentStore


def write_wdc(stream: BinaryIO, store: SegmentStore) -> int:
    raise UnsupportedFormatError("WDC file output is currently not supported")
