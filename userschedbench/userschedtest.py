"""Start a CPU-bound dummy process under a chosen scheduling policy."""

from __future__ import annotations

import os
import sys
from typing import NoReturn, Sequence

from .policy import apply_policy, parse_policy_lenient

_USAGE = (
    "Usage: {prog} <scheduling_policy>\n"
    "Scheduling policies: 0 = SCHED_OTHER, 1 = SCHED_FIFO, 2 = SCHED_RR, 7 = SCHED_USER"
)


def busy_loop() -> NoReturn:
    """Announce the current process and spin forever."""
    print(f"Running dummy process with PID {os.getpid()}", flush=True)
    while True:
        pass


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry point: userschedtest <policy>; unknown policies mean SCHED_USER."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(_USAGE.format(prog="userschedtest"), file=sys.stderr)
        return 1
    policy = parse_policy_lenient(args[0])

    sys.stdout.flush()
    sys.stderr.flush()
    pid = os.fork()
    if pid == 0:
        try:
            apply_policy(policy)
        except OSError as exc:
            print(f"sched_setscheduler failed: {exc.strerror or exc}", file=sys.stderr, flush=True)
            os._exit(1)
        busy_loop()

    print(f"Started child process with PID {pid} using scheduling policy {int(policy)}", flush=True)
    os.waitpid(pid, 0)
    return 0


if __name__ == "__main__":
    sys.exit(main())