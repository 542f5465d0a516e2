"""Raw binary loader (not implemented yet)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from retrofile.errors import UnsupportedFormatError
from retrofile.image import SegmentStore


@dataclass(frozen=True)
class BinaryOptions:
    """Per-file options for raw binary input."""

    start_address: int


def load_binary(stream: BinaryIO, store: SegmentStore, options: BinaryOptions) -> None:
    """Place the bytes of ``stream`` at ``options.start_address``.

    Raw binary input is accepted on the command line but decoding is not
    implemented; the call always fails.
    """

    raise UnsupportedFormatError(
        f"Raw binary input (addr=0x{options.start_address:X}) is currently not supported"
    )
