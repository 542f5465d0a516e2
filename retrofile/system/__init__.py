"""Conversion session wiring loaders, the image store and writers together."""

from .session import (
    ConversionConfig,
    ConversionSession,
    InputSpec,
    LoadReport,
    OutputSpec,
    WriteReport,
    convert,
)

__all__ = [
    "ConversionConfig",
    "ConversionSession",
    "InputSpec",
    "LoadReport",
    "OutputSpec",
    "WriteReport",
    "convert",
]
