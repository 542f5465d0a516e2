"""Conversion run: load every input into one image, then write the output."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from retrofile.errors import CannotOpenFileError, InvalidArgumentsError, OutputIoError
from retrofile.formats import FileType, FormatRegistry, default_registry
from retrofile.image import SegmentStore
from retrofile.loader import BinaryOptions, HexLoadResult
from retrofile.utils import debug_log


@dataclass
class InputSpec:
    """One input file and how to decode it."""

    path: Path
    file_type: FileType = FileType.HEX
    options: Optional[BinaryOptions] = None


@dataclass
class OutputSpec:
    path: Path
    file_type: FileType = FileType.PAP


@dataclass
class ConversionConfig:
    """Everything needed for one conversion run."""

    inputs: List[InputSpec] = field(default_factory=list)
    output: Optional[OutputSpec] = None


@dataclass
class LoadReport:
    path: Path
    file_type: FileType
    result: Optional[HexLoadResult]
    merged_ranges: int = 0


@dataclass
class WriteReport:
    path: Path
    file_type: FileType
    records: int


class ConversionSession:
    """Owns the memory image for a single conversion run.

    Inputs are decoded in the order they are loaded and the image is
    coalesced after each one. Any exception leaves the session unusable for
    output; callers are expected to abandon the run.
    """

    def __init__(self, registry: FormatRegistry | None = None) -> None:
        self._registry = registry or default_registry()
        self.store = SegmentStore()
        self._loaded = 0

    @property
    def registry(self) -> FormatRegistry:
        return self._registry

    @property
    def loaded_inputs(self) -> int:
        return self._loaded

    def load_input(
        self,
        path: Path,
        file_type: FileType = FileType.HEX,
        options: Optional[BinaryOptions] = None,
    ) -> LoadReport:
        fmt = self._registry.input_format(file_type)
        path = Path(path)
        try:
            handle = path.open("rb")
        except OSError as exc:
            raise CannotOpenFileError(f'Unable to open the input file "{path}": {exc.strerror}') from exc

        with handle:
            result = fmt.decode(handle, self.store, options)

        merged = self.store.coalesce()
        self._loaded += 1
        debug_log("session", "loaded %s (%d ranges, %d merged)", path, len(self.store), merged)
        return LoadReport(path, file_type, result, merged)

    def write_output(self, path: Path, file_type: FileType = FileType.PAP) -> WriteReport:
        """Encode the image to ``path``.

        The output is written to a temporary file next to ``path`` and renamed
        into place only after the encoder finishes. The file gets the same
        permissions a plain ``open`` would give it under the current umask.
        """

        fmt = self._registry.output_format(file_type)
        path = Path(path)
        try:
            fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        except OSError as exc:
            raise CannotOpenFileError(f'Unable to open the output file "{path}": {exc.strerror}') from exc

        try:
            try:
                with os.fdopen(fd, "w+b") as handle:
                    os.fchmod(handle.fileno(), _new_file_mode())
                    records = fmt.encode(handle, self.store)
            except OSError as exc:
                raise OutputIoError(f'Error writing output file "{path}": {exc.strerror or exc}') from exc
            try:
                os.replace(temp_name, path)
            except OSError as exc:
                raise CannotOpenFileError(f'Unable to open the output file "{path}": {exc.strerror}') from exc
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

        debug_log("session", "wrote %s (%d records)", path, records)
        return WriteReport(path, file_type, records)

    def run(self, config: ConversionConfig) -> WriteReport:
        if not config.inputs:
            raise InvalidArgumentsError("At least one input file must be specified")
        if config.output is None:
            raise InvalidArgumentsError("An output file must be specified")

        for spec in config.inputs:
            self.load_input(spec.path, spec.file_type, spec.options)
        return self.write_output(config.output.path, config.output.file_type)


def _new_file_mode() -> int:
    # os.umask only reports the mask by replacing it.
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def convert(config: ConversionConfig, registry: FormatRegistry | None = None) -> WriteReport:
    """Run a whole conversion in a fresh session."""

    session = ConversionSession(registry)
    return session.run(config)
