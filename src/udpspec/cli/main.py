"""Main CLI entry point for udpspec."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..config import get_settings
from ..exceptions import UdpSpecError
from ..log import setup_logging
from ..parsers import load_spec, save_spec
from .analyze import analyze_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the udpspec CLI.

    Args:
        argv: Arguments to parse; defaults to ``sys.argv[1:]``

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="udpspec: Schema-Driven UDP Message Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  udpspec --analyze messages.idl               Show message layouts
  udpspec --convert messages.idl api.yaml      Convert IDL to YAML
  udpspec --version                            Show version

Logging is configured with UDPSPEC_LOG_LEVEL and UDPSPEC_LOG_FORMAT.
        """,
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze a spec file and show message layouts",
    )

    parser.add_argument(
        "--convert",
        metavar=("INPUT", "OUTPUT"),
        nargs=2,
        type=str,
        help="Convert a spec between notations (chosen by file extension)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"udpspec {__version__}",
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    if args.analyze:
        file_path = Path(args.analyze)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            analyze_file(file_path)
            return 0
        except (UdpSpecError, OSError) as e:
            print(f"Error analyzing file: {e}", file=sys.stderr)
            return 1

    if args.convert:
        source, target = (Path(p) for p in args.convert)
        try:
            spec = load_spec(source)
            save_spec(spec, target)
        except (UdpSpecError, OSError) as e:
            print(f"Error converting file: {e}", file=sys.stderr)
            return 1
        print(f"Converted {source} -> {target} ({len(spec.messages)} messages)")
        return 0

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
