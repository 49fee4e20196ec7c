"""
Test Configuration and Fixtures

This module provides shared fixtures for all tests.
"""

import sys
import tempfile
import textwrap
from pathlib import Path

import pytest

from paperage_fixtures.config import MatrixConfig, SizeClass, PASSPHRASE_ENV
from paperage_fixtures.invoker import InvocationResult


# Stand-in for paper-age: checks the passphrase, reads stdin, writes the output
FAKE_TOOL = textwrap.dedent("""
    import os
    import sys
    import time

    args = sys.argv[1:]
    output = args[args.index("--output") + 1]
    page_size = args[args.index("--page-size") + 1]
    data = sys.stdin.buffer.read()

    if "--sleep" in args:
        time.sleep(float(args[args.index("--sleep") + 1]))
    if not os.environ.get("PAPERAGE_PASSPHRASE"):
        sys.stderr.write("error: no passphrase\\n")
        sys.exit(3)
    if "--fail-on" in args and os.path.basename(output) == args[args.index("--fail-on") + 1]:
        sys.stderr.write("error: QR code too large\\n")
        sys.exit(4)
    if os.path.exists(output) and "--force" not in args:
        sys.stderr.write("error: output file exists\\n")
        sys.exit(5)

    with open(output, "wb") as f:
        f.write(b"%PDF-1.7\\n%" + page_size.encode() + b"\\n" + data)
""")


class RecordingInvoker:
    """Fake invoker recording every call instead of starting a process."""

    def __init__(self, exit_codes=None, errors=None):
        self.calls = []
        self.exit_codes = exit_codes or {}
        self.errors = errors or {}

    def invoke(self, args, stdin_payload, env, timeout=None):
        output = Path(args[args.index("--output") + 1]).name
        self.calls.append({
            "args": list(args),
            "payload": stdin_payload,
            "env": dict(env),
            "timeout": timeout,
            "output": output,
        })
        if output in self.errors:
            raise self.errors[output]
        code = self.exit_codes.get(output, 0)
        return InvocationResult(exit_code=code, stdout="", stderr="error: bad input\n" if code else "")

    @property
    def outputs(self):
        return [c["output"] for c in self.calls]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def no_ambient_passphrase(monkeypatch):
    """Make sure the tool's passphrase variable isn't inherited from the shell."""
    monkeypatch.delenv(PASSPHRASE_ENV, raising=False)


@pytest.fixture
def invoker():
    return RecordingInvoker()


@pytest.fixture
def matrix_config(temp_dir):
    """The reference matrix: three sizes by two page formats."""
    return MatrixConfig(
        page_formats=["a4", "letter"],
        size_classes=[
            SizeClass(name="small", byte_length=6),
            SizeClass(name="medium", byte_length=256),
            SizeClass(name="large", byte_length=900),
        ],
        output_dir=temp_dir,
    )


@pytest.fixture
def fake_tool(temp_dir):
    """Command line running the stand-in tool with the current interpreter."""
    script = temp_dir / "fake_paper_age.py"
    script.write_text(FAKE_TOOL)
    return [sys.executable, str(script)]


EXPECTED_NAMES = [
    "a4-small.pdf",
    "letter-small.pdf",
    "a4-medium.pdf",
    "letter-medium.pdf",
    "a4-large.pdf",
    "letter-large.pdf",
]
