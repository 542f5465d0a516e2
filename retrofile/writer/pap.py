"""MOS Technology paper tape (KIM-1 ``.pap``) writer."""

from __future__ import annotations

from typing import BinaryIO

from retrofile.errors import OutputIoError
from retrofile.image import Range, SegmentStore
from retrofile.utils import debug_log

PAP_RECORD_LENGTH = 24
RECORD_MARK = b";"
RECORD_TRAILER = b"\r\n" + b"\x00" * 6


def encode_record(address: int, payload: bytes) -> bytes:
    """Return one data record for ``payload`` loaded at ``address``."""

    if len(payload) > PAP_RECORD_LENGTH:
        raise ValueError(f"PAP records hold at most {PAP_RECORD_LENGTH} bytes")
    high = (address >> 8) & 0xFF
    low = address & 0xFF
    checksum = (len(payload) + high + low + sum(payload)) & 0xFFFF
    body = f"{len(payload):02X}{high:02X}{low:02X}{payload.hex().upper()}{checksum:04X}"
    return RECORD_MARK + body.encode("ascii") + RECORD_TRAILER


def encode_end_record(record_count: int) -> bytes:
    count = record_count & 0xFFFF
    return RECORD_MARK + f"00{count:04X}{count:04X}".encode("ascii") + RECORD_TRAILER


class PapEncoder:
    """Writes a :class:`SegmentStore` as paper tape records.

    Each range is cut into records of at most 24 bytes. The tape ends with a
    zero-length record carrying the number of data records twice.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._records = 0

    def encode(self, store: SegmentStore) -> int:
        """Write every range in ``store``; return the number of data records."""

        self._records = 0
        for current in store:
            self._encode_range(current)
        self._write(encode_end_record(self._records))
        debug_log("pap", "wrote %d data records", self._records)
        return self._records

    def _encode_range(self, current: Range) -> None:
        data = bytes(current.data)
        for offset in range(0, len(data), PAP_RECORD_LENGTH):
            chunk = data[offset : offset + PAP_RECORD_LENGTH]
            self._write(encode_record(current.address + offset, chunk))
            self._records += 1

    def _write(self, record: bytes) -> None:
        try:
            self._stream.write(record)
        except OSError as exc:
            raise OutputIoError(f"Error writing output file: {exc}") from exc


def write_pap(stream: BinaryIO, store: SegmentStore) -> int:
    return PapEncoder(stream).encode(store)
