"""Exception hierarchy and process exit codes for the conversion pipeline."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit status for every outcome of a conversion run."""

    OK = 0
    USAGE_SHOWN = 1
    UNSUPPORTED = 2
    INVALID_ARGUMENTS = 3
    CANNOT_OPEN_FILE = 4
    END_OF_FILE = 5
    IO_ERROR = 6
    INVALID_DATA = 7
    MIXED_ADDRESSING_MODES = 8
    INVALID_RECORD_TYPE = 9
    END_RECORD_ERROR = 10
    CHECKSUM_ERROR = 11
    NO_MEMORY = 12
    OVERLAPPING_SEGMENT = 13


class RetroFileError(RuntimeError):
    """Base class for failures that abort a conversion run."""

    exit_code: ExitCode = ExitCode.INVALID_DATA


class UnsupportedFormatError(RetroFileError):
    """Raised by decoders and encoders that are registered but not implemented."""

    exit_code = ExitCode.UNSUPPORTED


class InvalidArgumentsError(RetroFileError):
    """Raised when the command line or a file option cannot be accepted."""

    exit_code = ExitCode.INVALID_ARGUMENTS


class CannotOpenFileError(RetroFileError):
    """Raised when an input or output file cannot be opened."""

    exit_code = ExitCode.CANNOT_OPEN_FILE


class OutputIoError(RetroFileError):
    """Raised when writing the encoded image fails."""

    exit_code = ExitCode.IO_ERROR


class HexFormatError(RetroFileError):
    """Raised when an Intel HEX stream violates the record structure."""


class EndOfInputError(HexFormatError):
    """The stream ended in the middle of a value."""

    exit_code = ExitCode.END_OF_FILE


class InvalidDigitError(HexFormatError):
    """A character outside ``[0-9a-fA-F]`` appeared where a hex digit was expected."""

    exit_code = ExitCode.INVALID_DATA


class AddressRangeError(HexFormatError):
    """A data record reaches past the 32-bit address space."""

    exit_code = ExitCode.INVALID_DATA


class InvalidRecordTypeError(HexFormatError):
    exit_code = ExitCode.INVALID_RECORD_TYPE


class ChecksumError(HexFormatError):
    exit_code = ExitCode.CHECKSUM_ERROR


class MixedAddressingModesError(HexFormatError):
    """Extended segment and extended linear addressing were both used in one stream."""

    exit_code = ExitCode.MIXED_ADDRESSING_MODES


class EndRecordError(HexFormatError):
    """Base class for end-of-file record violations."""

    exit_code = ExitCode.END_RECORD_ERROR


class DuplicateEndRecordError(EndRecordError):
    """A record followed the end-of-file record."""


class MissingEndRecordError(EndRecordError):
    """The stream ended without an end-of-file record."""


class OverlappingSegmentError(RetroFileError):
    """A segment claims addresses already held by the image."""

    exit_code = ExitCode.OVERLAPPING_SEGMENT


def exit_code_for(exc: BaseException) -> ExitCode:
    """Map an exception raised during a run to its process exit status."""

    if isinstance(exc, RetroFileError):
        return exc.exit_code
    if isinstance(exc, MemoryError):
        return ExitCode.NO_MEMORY
    if isinstance(exc, OSError):
        return ExitCode.IO_ERROR
    raise TypeError(f"no exit code for {type(exc).__name__}")
