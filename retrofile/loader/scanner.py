"""ASCII hex digit reader used by the Intel HEX decoder."""

from __future__ import annotations

from typing import BinaryIO, Optional

from retrofile.errors import EndOfInputError, InvalidDigitError

RECORD_MARK = b":"


class Checksum:
    """Running 8-bit sum of the bytes that make up one record."""

    def __init__(self) -> None:
        self._total = 0

    def add(self, value: int) -> None:
        self._total = (self._total + value) & 0xFF

    @property
    def value(self) -> int:
        return self._total

    def twos_complement(self) -> int:
        return (~self._total + 1) & 0xFF


class ByteScanner:
    """Reads big-endian values encoded as pairs of ASCII hex digits."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def find_record_start(self) -> bool:
        """Skip to just past the next record mark; ``False`` at end of input."""

        while True:
            char = self._stream.read(1)
            if not char:
                return False
            if char == RECORD_MARK:
                return True

    def read_u8(self, checksum: Optional[Checksum] = None) -> int:
        high = self._read_digit()
        low = self._read_digit()
        value = (high << 4) | low
        if checksum is not None:
            checksum.add(value)
        return value

    def read_u16(self, checksum: Optional[Checksum] = None) -> int:
        high = self.read_u8(checksum)
        low = self.read_u8(checksum)
        return (high << 8) | low

    def read_u32(self, checksum: Optional[Checksum] = None) -> int:
        value = 0
        for _ in range(4):
            value = (value << 8) | self.read_u8(checksum)
        return value

    def read_bytes(self, count: int, checksum: Optional[Checksum] = None) -> bytes:
        return bytes(self.read_u8(checksum) for _ in range(count))

    def _read_digit(self) -> int:
        char = self._stream.read(1)
        if not char:
            raise EndOfInputError("Unexpected end of file")
        code = char[0]
        if 0x30 <= code <= 0x39:
            return code - 0x30
        if 0x61 <= code <= 0x66:
            return code - 0x61 + 10
        if 0x41 <= code <= 0x46:
            return code - 0x41 + 10
        raise InvalidDigitError(f"Invalid hex digit {char!r}")
