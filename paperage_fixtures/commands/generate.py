"""
Fixtures CLI - Generate Command

Runs the full fixture matrix through the external tool.
"""

import sys
import logging
from typing import List

from . import config_from_args
from ..config import default_passphrase
from ..payload import EntropyError
from ..passphrase import PassphraseError
from ..report import format_summary, write_report
from ..runner import FixtureMatrixRunner

logger = logging.getLogger(__name__)


def generate_command(args, forwarded: List[str], invoker=None) -> int:
    """
    Generate every fixture of the matrix.

    Args:
        args: Argparse namespace with the matrix options plus:
            - passphrase: Passphrase for the tool (optional)
            - timeout: Per-job timeout in seconds (optional)
            - seed: Seed for reproducible payloads (optional)
            - report: Path for a JSON report (optional)
        forwarded: Arguments passed verbatim to every tool invocation
        invoker: Replacement tool invoker, used by tests

    Returns:
        Process exit status
    """
    config = config_from_args(args)
    passphrase = args.passphrase if args.passphrase is not None else default_passphrase()
    runner = FixtureMatrixRunner(config, invoker)

    print(f"Generating fixtures with: {' '.join(config.tool_command)}")
    if forwarded:
        print(f"  Forwarded: {' '.join(forwarded)}")
    print(f"  Output: {config.output_dir}")

    try:
        batch = runner.run(passphrase, forwarded)
    except (EntropyError, PassphraseError, OSError) as e:
        logger.error(f"Batch aborted: {e}")
        print(f"Error: Batch aborted: {e}", file=sys.stderr)
        return 1

    print()
    print(format_summary(batch))

    if args.report:
        try:
            write_report(batch, args.report)
        except OSError as e:
            logger.error(f"Could not write report: {e}")
            print(f"Error: Could not write report {args.report}: {e}", file=sys.stderr)
            return 1
        print(f"Report: {args.report}")

    if batch.ok:
        print("✓ ALL FIXTURES GENERATED")
    else:
        print("✗ SOME FIXTURES FAILED")
    return batch.exit_code
