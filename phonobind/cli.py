"""
phonobind CLI - Argument parsing and dispatch.

Responsibilities:
- Argument parsing
- Printing results and errors
- Exit codes

Forbidden:
- No binding logic; everything goes through the registered package namespace
"""

import argparse
import sys
from pathlib import Path

from phonobind.config import LOG_LEVELS, BindingConfig


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="phonobind",
        description="phonobind command-line interface.",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="Logging level (default: PHONOBIND_LOG_LEVEL or WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command")

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Print the registered classes and enums as JSON.",
        description=(
            "Print the registered classes and enums as JSON.\n\n"
            "Each class lists its parent, registration state, attached members\n"
            "and buffer contract; each enum lists its labels and ordinals."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    inspect_parser.add_argument(
        "--output",
        metavar="PATH",
        help="Write the report to PATH instead of stdout.",
    )

    subparsers.add_parser(
        "version",
        help="Print the package and linear-algebra library versions.",
    )

    info_parser = subparsers.add_parser(
        "info",
        help="Load an audio file as a Sound and print its description.",
    )
    info_parser.add_argument(
        "file",
        metavar="FILE",
        help="Path to an audio file.",
    )

    return parser


def cmd_inspect(args: argparse.Namespace) -> int:
    """Handle the 'inspect' subcommand."""
    from phonobind.bindings import BINDINGS
    from phonobind.utils import serialize_json

    report = serialize_json(BINDINGS.describe())
    if args.output is None:
        sys.stdout.write(report)
    else:
        Path(args.output).write_text(report)
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Handle the 'version' subcommand."""
    import phonobind
    from phonobind.errors import NumericalError

    try:
        major, minor, patch = phonobind.lapack_version()
    except NumericalError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"phonobind {phonobind.__version__}")
    print(f"LAPACK {major}.{minor}.{patch}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Handle the 'info' subcommand."""
    import phonobind

    path = Path(args.file)
    if not path.is_file():
        print(f"Error: Input file not found: {path}", file=sys.stderr)
        return 1
    try:
        sound = phonobind.Sound(path)
    except RuntimeError as e:
        print(f"Error: Cannot read {path}: {e}", file=sys.stderr)
        return 1
    print(sound)
    print(f"Sampling frequency: {sound.sampling_frequency:g} Hz")
    print(f"Duration: {sound.duration:g} s")
    return 0


COMMANDS = {
    "inspect": cmd_inspect,
    "version": cmd_version,
    "info": cmd_info,
}


def main() -> None:
    """Main entry point."""
    from phonobind.utils import configure_logging

    parser = create_parser()
    args = parser.parse_args()

    try:
        config = BindingConfig.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    configure_logging(args.log_level or config.log_level)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(COMMANDS[args.command](args))
