"""
Fixture Matrix Runner

Enumerates every (size class, page format) combination and feeds a random
payload for each one through the external tool.

Jobs run one at a time, size classes outer and page formats inner, in the
order they are configured. A failing job is recorded and the batch moves
on; only a missing entropy source or passphrase aborts the run.
"""

import random
import time
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import MatrixConfig, OverwritePolicy, SizeClass
from .invoker import LaunchError, SubprocessInvoker, ToolError
from .passphrase import PassphraseScope
from .payload import encode_payload, generate_payload

logger = logging.getLogger(__name__)


class OutputExistsError(Exception):
    """Raised when a job's output file exists and the policy forbids replacing it."""
    kind = "exists"


class JobStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


def output_filename(page_format: str, size_class: str, extension: str = "pdf") -> str:
    """Name of the artifact for one job, e.g. ``a4-small.pdf``."""
    return f"{page_format}-{size_class}.{extension}"


@dataclass(frozen=True)
class FixtureJob:
    """One (size class, page format) unit of work."""
    size_class: str
    byte_length: int
    page_format: str
    output_path: Path

    @property
    def name(self) -> str:
        return self.output_path.name


@dataclass
class JobResult:
    """Outcome of a single fixture job."""
    job: FixtureJob
    status: JobStatus
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    error: Optional[Exception] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status != JobStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        error = None
        if self.error is not None:
            error = {
                "kind": getattr(self.error, "kind", type(self.error).__name__),
                "message": str(self.error),
            }
        return {
            "size_class": self.job.size_class,
            "byte_length": self.job.byte_length,
            "page_format": self.job.page_format,
            "output": str(self.job.output_path),
            "status": self.status.value,
            "exit_code": self.exit_code,
            "stderr": self.stderr,
            "error": error,
            "elapsed": round(self.elapsed, 3),
        }


@dataclass
class BatchResult:
    """Ordered results for every job of one batch run."""
    jobs: List[JobResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[JobResult]:
        return [r for r in self.jobs if r.status == JobStatus.SUCCESS]

    @property
    def failed(self) -> List[JobResult]:
        return [r for r in self.jobs if r.status == JobStatus.FAILED]

    @property
    def skipped(self) -> List[JobResult]:
        return [r for r in self.jobs if r.status == JobStatus.SKIPPED]

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": len(self.jobs),
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "skipped": len(self.skipped),
            "jobs": [r.to_dict() for r in self.jobs],
        }


class FixtureMatrixRunner:
    """
    Drives the fixture matrix through the external tool.

    Args:
        config: Validated matrix configuration
        invoker: Object with an ``invoke(args, stdin_payload, env, timeout)``
            method; defaults to running real subprocesses
    """

    def __init__(self, config: MatrixConfig, invoker=None):
        self.config = config
        self.invoker = invoker or SubprocessInvoker()

    def plan(self) -> List[FixtureJob]:
        """Enumerate the jobs of the matrix in execution order."""
        jobs = []
        for size in self.config.size_classes:
            for page_format in self.config.page_formats:
                filename = output_filename(page_format, size.name, self.config.extension)
                jobs.append(FixtureJob(
                    size_class=size.name,
                    byte_length=size.byte_length,
                    page_format=page_format,
                    output_path=self.config.output_dir / filename,
                ))
        return jobs

    def build_command(self, job: FixtureJob, forwarded_args: Sequence[str] = ()) -> List[str]:
        """Command line for one job: tool, forwarded args, then format and output flags."""
        args = list(self.config.tool_command)
        args.extend(forwarded_args)
        if self.config.overwrite == OverwritePolicy.FORCE and self.config.force_flag not in forwarded_args:
            args.append(self.config.force_flag)
        args.extend([
            self.config.page_format_flag, job.page_format,
            self.config.output_flag, str(job.output_path),
        ])
        return args

    def run(self, passphrase: str, forwarded_args: Sequence[str] = ()) -> BatchResult:
        """
        Run every job of the matrix.

        Args:
            passphrase: Secret handed to the tool through its environment
            forwarded_args: Extra tool flags passed verbatim to every job

        Returns:
            BatchResult with one entry per job, in execution order

        Raises:
            EntropyError: If random payload bytes cannot be generated
            PassphraseError: If the passphrase cannot be set
        """
        forwarded_args = list(forwarded_args)
        jobs = self.plan()
        rng = random.Random(self.config.seed) if self.config.seed is not None else None

        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(
            f"Generating {len(jobs)} fixtures in {self.config.output_dir} "
            f"({len(self.config.size_classes)} sizes x {len(self.config.page_formats)} formats)"
        )

        batch = BatchResult()
        with PassphraseScope(self.config.passphrase_env, passphrase) as scope:
            for job in jobs:
                batch.jobs.append(self._run_job(job, scope, forwarded_args, rng))

        logger.info(
            f"Batch finished: {len(batch.succeeded)} succeeded, "
            f"{len(batch.failed)} failed, {len(batch.skipped)} skipped"
        )
        return batch

    def _run_job(
        self,
        job: FixtureJob,
        scope: PassphraseScope,
        forwarded_args: List[str],
        rng: Optional[random.Random],
    ) -> JobResult:
        if job.output_path.exists():
            if self.config.overwrite == OverwritePolicy.SKIP:
                logger.warning(f"Skipping {job.name}: output already exists")
                return JobResult(job=job, status=JobStatus.SKIPPED)
            if self.config.overwrite == OverwritePolicy.FAIL:
                logger.warning(f"Not replacing existing {job.name}")
                return JobResult(
                    job=job,
                    status=JobStatus.FAILED,
                    error=OutputExistsError(f"{job.output_path} already exists"),
                )

        payload = encode_payload(generate_payload(job.byte_length, rng))
        args = self.build_command(job, forwarded_args)
        env = scope.environment()

        logger.info(f"Generating {job.name} ({job.byte_length} bytes)")
        started = time.monotonic()
        try:
            outcome = self.invoker.invoke(args, payload, env, timeout=self.config.timeout)
        except LaunchError as e:
            logger.warning(f"{job.name}: {e}")
            return JobResult(job=job, status=JobStatus.FAILED, error=e,
                             elapsed=time.monotonic() - started)
        except ToolError as e:
            logger.warning(f"{job.name}: {e}")
            return JobResult(job=job, status=JobStatus.FAILED, exit_code=e.exit_code,
                             stderr=e.stderr, error=e, elapsed=time.monotonic() - started)
        elapsed = time.monotonic() - started

        if outcome.exit_code != 0:
            error = ToolError(
                f"{args[0]} exited with status {outcome.exit_code}",
                exit_code=outcome.exit_code,
                stderr=outcome.stderr,
            )
            logger.warning(f"{job.name}: {error}")
            return JobResult(job=job, status=JobStatus.FAILED, exit_code=outcome.exit_code,
                             stdout=outcome.stdout, stderr=outcome.stderr, error=error,
                             elapsed=elapsed)

        logger.debug(f"{job.name} done in {elapsed:.2f}s")
        return JobResult(job=job, status=JobStatus.SUCCESS, exit_code=0,
                         stdout=outcome.stdout, stderr=outcome.stderr, elapsed=elapsed)


def run(
    page_formats: Iterable[str],
    size_classes: Sequence[Union[SizeClass, Tuple[str, int]]],
    passphrase: str,
    forwarded_args: Sequence[str] = (),
    invoker=None,
    **options,
) -> BatchResult:
    """
    Generate the fixture matrix in one call.

    Page formats given as a set are sorted so the execution order stays
    fixed. Remaining keyword options are ``MatrixConfig`` fields.
    """
    if isinstance(page_formats, (set, frozenset)):
        formats = sorted(page_formats)
    else:
        formats = list(page_formats)
    sizes = [
        s if isinstance(s, SizeClass) else SizeClass(name=s[0], byte_length=s[1])
        for s in size_classes
    ]
    config = MatrixConfig(page_formats=formats, size_classes=sizes, **options)
    return FixtureMatrixRunner(config, invoker).run(passphrase, forwarded_args)
