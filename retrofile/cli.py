"""Command-line front end for the retro file conversion utility."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn, Sequence

from retrofile import __version__
from retrofile.errors import ExitCode, InvalidArgumentsError, RetroFileError, exit_code_for
from retrofile.formats import FileType, FormatRegistry, default_registry
from retrofile.loader import BinaryOptions
from retrofile.system import ConversionConfig, ConversionSession, InputSpec, OutputSpec

PROG = "retrofile"
BANNER = f"Retro file conversion utility, v{__version__}."

_USAGE = f"""\
{PROG} [GLOBAL_OPTIONS] \\
   [-if{{h | b}} INPUT_FILE[,IN_FILE_OPTS] ...] \\
   -of{{p | w}} OUTPUT_FILE[,OUT_FILE_OPTS]"""

_EPILOG = f"""\
GLOBAL_OPTIONS    Currently none supported.

IN_FILE_OPTS
   For Intel HEX files: no options currently supported.
   For raw binary files:
      A=ADDR      The starting address of the file ($ or 0x for hex).

OUT_FILE_OPTS
   For MOS paper tape files: no options currently supported.
   For WDC binary files: no options currently supported.

Multiple input files are supported, and the types may be freely mixed.
Only one output file is supported.

Examples:

{PROG} -ifh inFile.hex -ofp outFile.pap
{PROG} -ifb inFile.bin,A=0x200 -ofw outFile.wdc.bin
{PROG} -ifb inFile1.bin,A=0x200 -ifb inFile2.bin,A=0x8000 -ifh inFile3.hex -ofw outFile.wdc.bin
"""


class _UsageShown(Exception):
    """Raised instead of exiting after ``--help`` has been printed."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise InvalidArgumentsError(message)

    def exit(self, status: int = 0, message: str | None = None) -> NoReturn:
        if message:
            self._print_message(message, sys.stderr)
        raise _UsageShown()


def parse_address(text: str) -> int:
    """Parse a start address written in decimal, octal, ``0x`` or ``$`` hex."""

    value = text.strip()
    try:
        if value.startswith("$"):
            number = int(value[1:], 16)
        elif value[:2].lower() == "0x":
            number = int(value[2:], 16)
        elif len(value) > 1 and value.startswith("0"):
            number = int(value[1:], 8)
        else:
            number = int(value, 10)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f'Invalid start address: "{text}"') from exc
    if not 0 <= number <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f'Start address out of range: "{text}"')
    return number


def _split_file_argument(text: str, kind: str) -> tuple[Path, list[str]]:
    name, *options = text.split(",")
    if not name:
        raise argparse.ArgumentTypeError(f"Missing {kind} file name")
    return Path(name), [option for option in options if option]


def _hex_input(text: str) -> InputSpec:
    path, options = _split_file_argument(text, "input")
    if options:
        raise argparse.ArgumentTypeError(f'Invalid HEX file option: "{options[0]}"')
    return InputSpec(path, FileType.HEX)


def _binary_input(text: str) -> InputSpec:
    path, options = _split_file_argument(text, "input")
    start_address = None
    for option in options:
        if not option.startswith("A="):
            raise argparse.ArgumentTypeError(f'Invalid binary file option: "{option}"')
        start_address = parse_address(option[2:])
    if start_address is None:
        raise argparse.ArgumentTypeError("Missing start address (A=<ADDR>)")
    return InputSpec(path, FileType.BIN, BinaryOptions(start_address))


def _output(file_type: FileType, label: str):
    def convert(text: str) -> OutputSpec:
        path, options = _split_file_argument(text, "output")
        if options:
            raise argparse.ArgumentTypeError(f'Invalid {label} file option: "{options[0]}"')
        return OutputSpec(path, file_type)

    return convert


def build_arg_parser(registry: FormatRegistry | None = None) -> argparse.ArgumentParser:
    registry = registry or default_registry()
    formats = ["Supported input file formats:"]
    formats.extend(f"   * {fmt.file_type.name}: {fmt.description}" for fmt in registry.input_formats())
    formats.append("")
    formats.append("Supported output file formats:")
    formats.extend(f"   * {fmt.file_type.name}: {fmt.description}" for fmt in registry.output_formats())

    parser = _ArgumentParser(
        prog=PROG,
        usage=_USAGE,
        description="\n".join(formats),
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-ifh",
        dest="inputs",
        action="append",
        type=_hex_input,
        metavar="INPUT_FILE",
        help="The input file is of type Intel HEX.",
    )
    parser.add_argument(
        "-ifb",
        dest="inputs",
        action="append",
        type=_binary_input,
        metavar="INPUT_FILE,A=ADDR",
        help="The input file is of type raw binary.",
    )
    parser.add_argument(
        "-ofp",
        dest="outputs",
        action="append",
        type=_output(FileType.PAP, "PAP"),
        metavar="OUTPUT_FILE",
        help="The output file is of type MOS paper tape.",
    )
    parser.add_argument(
        "-ofw",
        dest="outputs",
        action="append",
        type=_output(FileType.WDC, "WDC"),
        metavar="OUTPUT_FILE",
        help="The output file is of type WDC binary.",
    )
    return parser


def parse_config(argv: Sequence[str], registry: FormatRegistry | None = None) -> ConversionConfig:
    parser = build_arg_parser(registry)
    args = parser.parse_args(list(argv))

    if not args.inputs:
        raise InvalidArgumentsError("At least one input file must be specified")
    if not args.outputs:
        raise InvalidArgumentsError("An output file must be specified")
    if len(args.outputs) > 1:
        raise InvalidArgumentsError("Only one output file is supported")

    return ConversionConfig(inputs=list(args.inputs), output=args.outputs[0])


def run_conversion(config: ConversionConfig, registry: FormatRegistry | None = None) -> None:
    """Run ``config`` while reporting progress on stdout."""

    session = ConversionSession(registry)
    for spec in config.inputs:
        fmt = session.registry.input_format(spec.file_type)
        print(f'Loading "{spec.path}" as {fmt.describe_input(spec.options)}')
        session.load_input(spec.path, spec.file_type, spec.options)

    print()
    print("Ranges:")
    for current in session.store:
        print("0x%04X - 0x%04X: %u bytes." % (current.address, current.end, len(current)))

    output = config.output
    if output is None:
        raise InvalidArgumentsError("An output file must be specified")
    fmt = session.registry.output_format(output.file_type)
    print()
    print(f'Writing "{output.path}"...')
    session.write_output(output.path, output.file_type)
    print(fmt.written_message)


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    registry = default_registry()

    print(BANNER)
    print()

    if not args:
        build_arg_parser(registry).print_help()
        return int(ExitCode.USAGE_SHOWN)

    try:
        config = parse_config(args, registry)
        run_conversion(config, registry)
    except _UsageShown:
        return int(ExitCode.USAGE_SHOWN)
    except RetroFileError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return int(exit_code_for(exc))
    except MemoryError as exc:
        print(f"{PROG}: Out of memory", file=sys.stderr)
        return int(exit_code_for(exc))
    except OSError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return int(exit_code_for(exc))
    return int(ExitCode.OK)


if __name__ == "__main__":
    sys.exit(main())
