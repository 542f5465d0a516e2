"""Encoders for the supported output file formats."""

from __future__ import annotations

from .pap import PAP_RECORD_LENGTH, PapEncoder, encode_end_record, encode_record, write_pap
from .wdc import write_wdc

__all__ = [
    "PAP_RECORD_LENGTH",
    "PapEncoder",
    "encode_end_record",
    "encode_record",
    "write_pap",
    "write_wdc",
]
