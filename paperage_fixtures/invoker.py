"""
Tool Invocation Module

Narrow adapter around the external tool so the runner can be driven by a
fake in tests.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

logger = logging.getLogger(__name__)


class LaunchError(Exception):
    """Raised when the external tool could not be started."""
    kind = "launch"


class ToolError(Exception):
    """Raised when the external tool ran but did not succeed."""
    kind = "tool"

    def __init__(self, message: str, exit_code: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class ToolTimeoutError(ToolError):
    """Raised when the external tool exceeded the per-job timeout."""
    kind = "timeout"


@dataclass
class InvocationResult:
    """Outcome of one tool process."""
    exit_code: int
    stdout: str
    stderr: str


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


class SubprocessInvoker:
    """Runs the external tool as a child process."""

    def invoke(
        self,
        args: Sequence[str],
        stdin_payload: bytes,
        env: Dict[str, str],
        timeout: Optional[float] = None,
    ) -> InvocationResult:
        """
        Run the tool once and wait for it to exit.

        Args:
            args: Full command line, program first
            stdin_payload: Bytes piped to the tool's standard input
            env: Complete environment for the child process
            timeout: Seconds before the child is killed

        Returns:
            InvocationResult with the exit code and decoded output
        """
        logger.debug(f"Running: {' '.join(args)}")
        try:
            completed = subprocess.run(
                list(args),
                input=stdin_payload,
                env=env,
                capture_output=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolTimeoutError(
                f"{args[0]} timed out after {timeout}s",
                stderr=_decode(e.stderr),
            ) from e
        except OSError as e:
            # FileNotFoundError, PermissionError, ...
            raise LaunchError(f"Could not start {args[0]}: {e}") from e

        return InvocationResult(
            exit_code=completed.returncode,
            stdout=_decode(completed.stdout),
            stderr=_decode(completed.stderr),
        )
