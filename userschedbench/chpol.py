"""Run a command under a chosen scheduling policy."""

from __future__ import annotations

import os
import subprocess
import sys
from typing import Sequence

from .policy import InvalidPolicyError, SchedPolicy, apply_policy, parse_policy

_USAGE = (
    "Usage: {prog} <scheduling_policy> <command> [args...]\n"
    "Scheduling policies: 0 = SCHED_OTHER, 1 = SCHED_FIFO, 2 = SCHED_RR, 7 = SCHED_USER"
)


def run_with_policy(policy: SchedPolicy, command: Sequence[str]) -> int:
    """Start the command with the policy applied and return its exit status.

    If the policy cannot be set, the child reports it and exits with status 1.
    Raises OSError if the command cannot be executed.
    """

    def _child_setup() -> None:
        try:
            apply_policy(policy)
        except OSError as exc:
            reason = exc.strerror or str(exc)
            os.write(2, f"sched_setscheduler failed: {reason}\n".encode())
            os._exit(1)

    process = subprocess.Popen(list(command), preexec_fn=_child_setup)
    return process.wait()


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry point: chpol <policy> <command> [args...]."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print(_USAGE.format(prog="chpol"), file=sys.stderr)
        return 1
    try:
        policy = parse_policy(args[0])
    except InvalidPolicyError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        run_with_policy(policy, args[1:])
    except OSError as exc:
        print(f"execvp failed: {exc.strerror or exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())