"""
Fixtures CLI - Plan Command

Lists the jobs a generate run would execute, without running anything.
"""

import shlex
from typing import List

from . import config_from_args
from ..runner import FixtureMatrixRunner


def plan_command(args, forwarded: List[str]) -> int:
    config = config_from_args(args)
    runner = FixtureMatrixRunner(config)
    jobs = runner.plan()

    for job in jobs:
        print(f"{job.name:<24} {job.byte_length:>8,} bytes")
        if args.commands:
            print(f"    {shlex.join(runner.build_command(job, forwarded))}")

    print(f"\n{len(jobs)} jobs")
    return 0
