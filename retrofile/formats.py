"""File-type tags and the decoders/encoders registered for them."""

from __future__ import annotations

from enum import Enum
from typing import Any, BinaryIO, Dict, Optional

from retrofile.errors import InvalidArgumentsError
from retrofile.image import SegmentStore
from retrofile.loader import BinaryOptions, HexLoadResult, load_binary, load_hex
from retrofile.writer import write_pap, write_wdc


class FileType(Enum):
    HEX = "h"
    BIN = "b"
    PAP = "p"
    WDC = "w"

    @property
    def letter(self) -> str:
        """Suffix used by the ``-if``/``-of`` command line options."""

        return self.value


class InputFormat:
    """Interface for decoders that load a file into a :class:`SegmentStore`."""

    file_type: FileType
    description: str
    loading_message: str

    def describe_input(self, options: Any = None) -> str:
        """Text completing the ``Loading "<file>" as ...`` progress line."""

        return self.loading_message

    def decode(
        self, stream: BinaryIO, store: SegmentStore, options: Any = None
    ) -> Optional[HexLoadResult]:  # pragma: no cover - interface
        raise NotImplementedError


class OutputFormat:
    """Interface for encoders that serialize a :class:`SegmentStore`."""

    file_type: FileType
    description: str
    written_message: str

    def encode(self, stream: BinaryIO, store: SegmentStore) -> int:  # pragma: no cover - interface
        raise NotImplementedError


class HexInputFormat(InputFormat):
    file_type = FileType.HEX
    description = "Intel HEX"
    loading_message = "an Intel HEX file."

    def decode(self, stream: BinaryIO, store: SegmentStore, options: Any = None) -> HexLoadResult:
        return load_hex(stream, store)


class BinaryInputFormat(InputFormat):
    file_type = FileType.BIN
    description = "Raw binary"
    loading_message = "a raw binary file."

    def describe_input(self, options: Any = None) -> str:
        if isinstance(options, BinaryOptions):
            return f"a raw binary file, addr=0x{options.start_address:X}."
        return self.loading_message

    def decode(self, stream: BinaryIO, store: SegmentStore, options: Any = None) -> None:
        if not isinstance(options, BinaryOptions):
            raise InvalidArgumentsError("Missing start address (A=<ADDR>)")
        load_binary(stream, store, options)


class PapOutputFormat(OutputFormat):
    file_type = FileType.PAP
    description = "MOS Technology paper tape (KIM-1)"
    written_message = "File written as PAP file."

    def encode(self, stream: BinaryIO, store: SegmentStore) -> int:
        return write_pap(stream, store)


class WdcOutputFormat(OutputFormat):
    file_type = FileType.WDC
    description = "WDC binary"
    written_message = "File written as WDC file."

    def encode(self, stream: BinaryIO, store: SegmentStore) -> int:
        return write_wdc(stream, store)


class FormatRegistry:
    """Maps :class:`FileType` tags to their decoder or encoder."""

    def __init__(self) -> None:
        self._inputs: Dict[FileType, InputFormat] = {}
        self._outputs: Dict[FileType, OutputFormat] = {}

    def register_input(self, fmt: InputFormat) -> None:
        self._inputs[fmt.file_type] = fmt

    def register_output(self, fmt: OutputFormat) -> None:
        self._outputs[fmt.file_type] = fmt

    def input_format(self, file_type: FileType) -> InputFormat:
        try:
            return self._inputs[file_type]
        except KeyError as exc:
            raise InvalidArgumentsError(f"Invalid input file type: {file_type.name}") from exc

    def output_format(self, file_type: FileType) -> OutputFormat:
        try:
            return self._outputs[file_type]
        except KeyError as exc:
            raise InvalidArgumentsError(f"Invalid output file type: {file_type.name}") from exc

    def input_formats(self) -> list[InputFormat]:
        return list(self._inputs.values())

    def output_formats(self) -> list[OutputFormat]:
        return list(self._outputs.values())


def default_registry() -> FormatRegistry:
    registry = FormatRegistry()
    registry.register_input(HexInputFormat())
    registry.register_input(BinaryInputFormat())
    registry.register_output(PapOutputFormat())
    registry.register_output(WdcOutputFormat())
    return registry
