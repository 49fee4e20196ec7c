"""
Configuration for the fixture matrix

Validated models describing which fixtures to generate and how to call
the external tool.
"""

import os
import re
import shlex
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

# External tool
TOOL_ENV = "PAPERAGE_BIN"
DEFAULT_TOOL = "paper-age"
PASSPHRASE_ENV = "PAPERAGE_PASSPHRASE"  # Read by the tool, never by us
PAGE_FORMAT_FLAG = "--page-size"
OUTPUT_FLAG = "--output"
FORCE_FLAG = "--force"

# Runner
RUNNER_PASSPHRASE_ENV = "PAPERAGE_FIXTURES_PASSPHRASE"
DEFAULT_PASSPHRASE = "snakeoil"
DEFAULT_EXTENSION = "pdf"

DEFAULT_PAGE_FORMATS = ["a4", "letter"]
DEFAULT_SIZE_CLASSES = [
    ("small", 6),
    ("medium", 256),
    ("large", 900),
]

# Names end up in filenames and tool arguments, so no leading dash
NAME_PATTERN = r'^[A-Za-z0-9][A-Za-z0-9_.-]*$'


class OverwritePolicy(str, Enum):
    """What to do when a job's output file already exists."""
    DELEGATE = "delegate"  # leave it to the tool
    FORCE = "force"        # pass the tool's force flag
    SKIP = "skip"          # keep the existing file, don't run the tool
    FAIL = "fail"          # mark the job failed, don't run the tool


class SizeClass(BaseModel):
    """A named payload size."""
    name: str = Field(..., min_length=1, max_length=64, pattern=NAME_PATTERN)
    byte_length: int = Field(..., gt=0)

    @classmethod
    def parse(cls, value: str) -> "SizeClass":
        """Parse a ``NAME=BYTES`` string."""
        name, sep, length = value.partition("=")
        if not sep:
            raise ValueError(f"Expected NAME=BYTES, got {value!r}")
        try:
            byte_length = int(length)
        except ValueError:
            raise ValueError(f"Byte length for {name!r} is not an integer: {length!r}")
        return cls(name=name.strip(), byte_length=byte_length)


class MatrixConfig(BaseModel):
    """Everything the runner needs apart from the passphrase."""
    page_formats: List[str] = Field(default_factory=lambda: list(DEFAULT_PAGE_FORMATS), min_length=1)
    size_classes: List[SizeClass] = Field(
        default_factory=lambda: [SizeClass(name=n, byte_length=b) for n, b in DEFAULT_SIZE_CLASSES],
        min_length=1,
    )
    tool_command: List[str] = Field(default_factory=lambda: [DEFAULT_TOOL], min_length=1)
    output_dir: Path = Path(".")
    extension: str = Field(default=DEFAULT_EXTENSION, min_length=1, pattern=r'^[A-Za-z0-9]+$')
    passphrase_env: str = Field(default=PASSPHRASE_ENV, min_length=1, pattern=r'^[A-Za-z_][A-Za-z0-9_]*$')
    page_format_flag: str = PAGE_FORMAT_FLAG
    output_flag: str = OUTPUT_FLAG
    force_flag: str = FORCE_FLAG
    overwrite: OverwritePolicy = OverwritePolicy.DELEGATE
    timeout: Optional[float] = Field(default=None, gt=0)
    seed: Optional[int] = None

    @field_validator("page_formats")
    @classmethod
    def check_page_formats(cls, formats: List[str]) -> List[str]:
        for fmt in formats:
            if not fmt or not _is_safe_name(fmt):
                raise ValueError(f"Invalid page format: {fmt!r}")
        duplicates = sorted({f for f in formats if formats.count(f) > 1})
        if duplicates:
            raise ValueError(f"Duplicate page formats: {', '.join(duplicates)}")
        return formats

    @field_validator("size_classes")
    @classmethod
    def check_size_classes(cls, sizes: List[SizeClass]) -> List[SizeClass]:
        names = [s.name for s in sizes]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate size classes: {', '.join(duplicates)}")
        return sizes

    @model_validator(mode="after")
    def check_flags(self) -> "MatrixConfig":
        for flag in (self.page_format_flag, self.output_flag, self.force_flag):
            if not flag.startswith("-"):
                raise ValueError(f"Tool flag must start with '-': {flag!r}")
        return self


def _is_safe_name(value: str) -> bool:
    return re.match(NAME_PATTERN, value) is not None


def default_tool_command() -> List[str]:
    """Tool command from PAPERAGE_BIN, falling back to ``paper-age`` on PATH."""
    return split_command(os.environ.get(TOOL_ENV, DEFAULT_TOOL))


def default_passphrase() -> str:
    return os.environ.get(RUNNER_PASSPHRASE_ENV, DEFAULT_PASSPHRASE)


def split_command(command: str) -> List[str]:
    """Split a tool command such as ``cargo run --quiet --`` shell-style."""
    parts = shlex.split(command)
    if not parts:
        raise ValueError("Tool command is empty")
    return parts
