"""Intel HEX loader feeding decoded records into a :class:`SegmentStore`."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO, Optional

from retrofile.errors import (
    AddressRangeError,
    CannotOpenFileError,
    ChecksumError,
    DuplicateEndRecordError,
    InvalidRecordTypeError,
    MissingEndRecordError,
    MixedAddressingModesError,
)
from retrofile.image import Segment, SegmentStore
from retrofile.utils import debug_log

from .scanner import ByteScanner, Checksum


ADDRESS_LIMIT = 0xFFFFFFFF


class RecordType(IntEnum):
    DATA = 0
    END_OF_FILE = 1
    EXTENDED_SEGMENT_ADDRESS = 2
    START_SEGMENT_ADDRESS = 3
    EXTENDED_LINEAR_ADDRESS = 4
    START_LINEAR_ADDRESS = 5


@dataclass
class HexLoadResult:
    """Summary of one decoded Intel HEX stream."""

    records: int = 0
    segments: int = 0
    data_bytes: int = 0
    entry_address: Optional[int] = None


def load_hex(stream: BinaryIO, store: SegmentStore) -> HexLoadResult:
    """Decode the Intel HEX records in ``stream`` into ``store``."""

    decoder = HexDecoder(stream, store)
    return decoder.decode()


def load_hex_from_path(path: Path, store: SegmentStore) -> HexLoadResult:
    """Decode an Intel HEX file from the filesystem."""

    try:
        handle = Path(path).open("rb")
    except OSError as exc:
        raise CannotOpenFileError(f'Unable to open the input file "{path}": {exc.strerror}') from exc
    with handle:
        return load_hex(handle, store)


class HexDecoder:
    """Record-by-record Intel HEX state machine.

    Extended segment and extended linear addressing are mutually exclusive in
    one stream. Exactly one end-of-file record is accepted and it must be the
    last record. Any failure aborts the decode; records already handed to the
    store stay there.
    """

    def __init__(self, stream: BinaryIO, store: SegmentStore) -> None:
        self._scanner = ByteScanner(stream)
        self._store = store
        self._segment_base = 0
        self._linear_base = 0
        self._entry_address: Optional[int] = None
        self._end_record_seen = False
        self._result = HexLoadResult()

    def decode(self) -> HexLoadResult:
        while self._scanner.find_record_start():
            if self._end_record_seen:
                raise DuplicateEndRecordError("Multiple end records encountered")
            self._decode_record()

        if not self._end_record_seen:
            raise MissingEndRecordError("No end record was found")

        self._result.entry_address = self._entry_address
        if self._entry_address is not None:
            self._store.entry_address = self._entry_address
        return self._result

    def _decode_record(self) -> None:
        checksum = Checksum()
        byte_count = self._scanner.read_u8(checksum)
        address = self._scanner.read_u16(checksum)
        record_type = self._scanner.read_u8(checksum)

        if record_type == RecordType.DATA:
            self._handle_data(byte_count, address, checksum)
        elif record_type == RecordType.END_OF_FILE:
            self._end_record_seen = True
        elif record_type == RecordType.EXTENDED_SEGMENT_ADDRESS:
            if self._linear_base != 0:
                raise MixedAddressingModesError(
                    "Both segment addressing and linear addressing used. "
                    "Only one type or the other is supported."
                )
            self._segment_base = self._scanner.read_u16(checksum)
        elif record_type == RecordType.START_SEGMENT_ADDRESS:
            segment = self._scanner.read_u16(checksum)
            offset = self._scanner.read_u16(checksum)
            self._entry_address = (segment << 4) + offset
        elif record_type == RecordType.EXTENDED_LINEAR_ADDRESS:
            if self._segment_base != 0:
                raise MixedAddressingModesError(
                    "Both segment addressing and linear addressing used. "
                    "Only one type or the other is supported."
                )
            self._linear_base = self._scanner.read_u16(checksum)
        elif record_type == RecordType.START_LINEAR_ADDRESS:
            self._entry_address = self._scanner.read_u32(checksum)
        else:
            raise InvalidRecordTypeError(f"Invalid record type: {record_type}")

        expected = checksum.twos_complement()
        actual = self._scanner.read_u8()
        if actual != expected:
            raise ChecksumError(
                f"Checksum error in record {self._result.records + 1}: "
                f"expected 0x{expected:02X}, found 0x{actual:02X}"
            )

        self._result.records += 1
        debug_log("hex", "record type=%d count=%d addr=0x%04X", record_type, byte_count, address)

    def _handle_data(self, byte_count: int, address: int, checksum: Checksum) -> None:
        if self._segment_base != 0:
            absolute = (self._segment_base << 4) + address
        else:
            absolute = (self._linear_base << 16) | address

        payload = self._scanner.read_bytes(byte_count, checksum)
        if payload and absolute + len(payload) - 1 > ADDRESS_LIMIT:
            raise AddressRangeError(
                f"Data record at 0x{absolute:X} ({len(payload)} bytes) extends past 0x{ADDRESS_LIMIT:08X}"
            )
        self._store.insert(Segment(absolute, payload))
        if payload:
            self._result.segments += 1
            self._result.data_bytes += len(payload)
