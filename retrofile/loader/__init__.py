"""Decoders for the supported input file formats."""

from __future__ import annotations

from .binary import BinaryOptions, load_binary
from .intel_hex import HexDecoder, HexLoadResult, RecordType, load_hex, load_hex_from_path
from .scanner import ByteScanner, Checksum

__all__ = [
    "BinaryOptions",
    "ByteScanner",
    "Checksum",
    "HexDecoder",
    "HexLoadResult",
    "RecordType",
    "load_binary",
    "load_hex",
    "load_hex_from_path",
]
