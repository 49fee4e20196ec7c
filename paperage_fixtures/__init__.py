"""
paperage-fixtures

Generates a matrix of sample paper-age PDFs across payload sizes and page
formats.
"""

from .config import MatrixConfig, OverwritePolicy, SizeClass
from .runner import BatchResult, FixtureJob, FixtureMatrixRunner, JobResult, JobStatus, run

__version__ = "1.0.0"

__all__ = [
    "BatchResult",
    "FixtureJob",
    "FixtureMatrixRunner",
    "JobResult",
    "JobStatus",
    "MatrixConfig",
    "OverwritePolicy",
    "SizeClass",
    "run",
]
