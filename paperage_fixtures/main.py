#!/usr/bin/env python3
"""
paperage-fixtures CLI

Generates sample PDFs for every combination of payload size and page
format by running paper-age once per combination:
- generate: Run the whole matrix
- plan: List the jobs without running them

Everything after ``--`` is forwarded unchanged to every paper-age call.
"""

import sys
import signal
import threading
import logging
import argparse
from pathlib import Path
from typing import List, Optional, Tuple

from .commands import add_matrix_options
from .commands.generate import generate_command
from .commands.plan import plan_command


def split_forwarded(argv: List[str]) -> Tuple[List[str], List[str]]:
    """Split the command line at the first ``--``."""
    if "--" in argv:
        index = argv.index("--")
        return argv[:index], argv[index + 1:]
    return argv, []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paperage-fixtures",
        description="Generate a size x page-format matrix of paper-age sample PDFs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  paperage-fixtures generate -- --force
  paperage-fixtures generate --size tiny=1 --size huge=1800 --page-format a4 -- -v --force
  paperage-fixtures generate --tool "cargo run --quiet --" --overwrite skip
  paperage-fixtures plan --commands
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version="paperage-fixtures 1.0.0"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    generate_parser = subparsers.add_parser("generate", help="Generate all fixtures")
    add_matrix_options(generate_parser)
    generate_parser.add_argument("--passphrase", help="Passphrase (default: $PAPERAGE_FIXTURES_PASSPHRASE or snakeoil)")
    generate_parser.add_argument("--timeout", type=float, help="Per-job timeout in seconds")
    generate_parser.add_argument("--seed", type=int, help="Seed for reproducible payloads")
    generate_parser.add_argument("--report", type=Path, help="Write a JSON report to this file")

    # Plan command
    plan_parser = subparsers.add_parser("plan", help="List the jobs without running them")
    add_matrix_options(plan_parser)
    plan_parser.add_argument("--commands", action="store_true", help="Show each tool command line")

    return parser


def _interrupt(signum, frame):
    raise KeyboardInterrupt


def main(argv: Optional[List[str]] = None, invoker=None) -> int:
    own_args, forwarded = split_forwarded(sys.argv[1:] if argv is None else list(argv))
    parser = build_parser()
    args = parser.parse_args(own_args)

    if not args.command:
        parser.print_help()
        return 2

    level = logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    previous = None
    try:
        if threading.current_thread() is threading.main_thread():
            previous = signal.signal(signal.SIGTERM, _interrupt)
        if args.command == "generate":
            return generate_command(args, forwarded, invoker)
        return plan_command(args, forwarded)
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation cancelled.")
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)


if __name__ == "__main__":
    sys.exit(main())
