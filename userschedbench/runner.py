"""Benchmark scenarios that run measured workloads in parallel rounds."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, NoReturn, Sequence

from .measure import exec_cmd_user_pol, measure
from .policy import SchedPolicy, atoi

NUM_CORES = 2

_HEADER = (
    "Iteration, Elapsed time [ns], User CPU time [ns], System CPU time [ns], "
    "Waiting time [ns], CPU Utilization, Voluntary context switches, "
    "Involuntary context switches, User, Scheduling Policy, Command"
)

_USERS = ("root", "user1", "user2", "user3")

_HASH_LARGE = "head -c 100000000 </dev/urandom | sha256sum > /dev/null"

_MIXED_COMMANDS = (
    "head -c 105000000 </dev/urandom | sha256sum > /dev/null",
    "head -c 100000000 </dev/urandom | md5sum > /dev/null",
    "dd if=/dev/urandom of=/dev/null bs=1M count=1000",
    'awk "BEGIN {for(i=0;i<1300000;i++) x=x+i}"',
    "yes | head -c 50000000 > /dev/null",
)

_UNEQUAL_COMMANDS = (
    "head -c 10500000 </dev/urandom | sha256sum > /dev/null",
    "head -c 10000000 </dev/urandom | md5sum > /dev/null",
    *("dd if=/dev/urandom of=/dev/null bs=1M count=100",) * 6,
    'awk "BEGIN {for(i=0;i<130000;i++) x=x+i}"',
)

_WARMUP_COMMAND = "dd if=/dev/zero of=/dev/null bs=4K count=1"
_PAIR_HEAVY = "dd if=/dev/urandom of=/dev/null bs=1M count=333"
_PAIR_LIGHT = "dd if=/dev/urandom of=/dev/null bs=1M count=100"

_RUNNABLE = range(0, 7)

MeasureFn = Callable[[str, str, int, SchedPolicy], object]


@dataclass(frozen=True)
class Job:
    """One command to be measured as a user under a scheduling policy."""

    user: str
    cmd: str
    iteration: int = 0
    policy: SchedPolicy = SchedPolicy.USER


Round = list[Job]


def _pair_rounds(cmd: str, count: int = 100) -> list[Round]:
    return [
        [Job("root", cmd, j, SchedPolicy.USER), Job("root", cmd, j, SchedPolicy.FIFO)]
        for j in range(count)
    ]


def scenario_rounds(number: int) -> list[Round]:
    """The rounds of jobs making up a measured scenario (1 to 7).

    Jobs within a round run in parallel; rounds run one after another.
    Raises ValueError for a scenario without measured rounds.
    """
    if number == 1:
        return [[Job(user, _HASH_LARGE) for user in _USERS]]
    if number == 2:
        return [[Job(user, _HASH_LARGE) for user in _USERS * 2]]
    if number == 3:
        return [[Job("root", cmd, j) for cmd in _MIXED_COMMANDS] for j in range(3)]
    if number == 4:
        return [
            [Job("root", cmd, j) for cmd in _MIXED_COMMANDS]
            for repeats in (1, 2, 3, 4, 5)
            for j in range(repeats)
        ]
    if number == 5:
        rounds = [[Job("root", cmd, j) for cmd in _UNEQUAL_COMMANDS] for j in range(3)]
        rounds.append([Job("root", cmd, 0, SchedPolicy.FIFO) for cmd in _UNEQUAL_COMMANDS])
        return rounds
    if number == 6:
        return _pair_rounds(_PAIR_HEAVY)
    if number == 7:
        return _pair_rounds(_PAIR_LIGHT)
    raise ValueError(f"scenario {number} has no measured rounds")


def warmup(count: int) -> None:
    """Run a tiny dd command count times under SCHED_USER to build up history."""
    print("Running dd commands to simulate past activity...", flush=True)
    for i in range(count):
        exec_cmd_user_pol("root", _WARMUP_COMMAND, SchedPolicy.USER)
        if i % 10 == 0:
            print(f"Completed {i} iterations of dd command.", flush=True)


def _run_child(job: Job, measure_fn: MeasureFn) -> NoReturn:
    code = 0
    try:
        measure_fn(job.user, job.cmd, job.iteration, job.policy)
    except BaseException:  # noqa: BLE001 - the child must never unwind into the parent's code
        code = 1
    finally:
        try:
            sys.stdout.flush()
            sys.stderr.flush()
        finally:
            os._exit(code)


def run_rounds(rounds: Iterable[Sequence[Job]], measure_fn: MeasureFn = measure) -> list[list[int]]:
    """Run each round's jobs in parallel child processes, waiting between rounds.

    Returns the exit codes of the children, round by round.
    Raises OSError if a child cannot be started.
    """
    results: list[list[int]] = []
    for round_jobs in rounds:
        sys.stdout.flush()
        sys.stderr.flush()
        pids = []
        for job in round_jobs:
            pid = os.fork()
            if pid == 0:
                _run_child(job, measure_fn)
            pids.append(pid)
        codes = []
        for pid in pids:
            _, status = os.waitpid(pid, 0)
            codes.append(os.waitstatus_to_exitcode(status))
        results.append(codes)
    return results


def _spin() -> NoReturn:
    counter = 0
    while True:
        counter += 1


def start_background_load(cores: int = NUM_CORES) -> list[int]:
    """Fork one endlessly spinning process per core and return their PIDs."""
    print("Running CPU background processes...", flush=True)
    sys.stderr.flush()
    pids = []
    for _ in range(cores):
        pid = os.fork()
        if pid == 0:
            _spin()
        pids.append(pid)
    return pids


def _launch_endless() -> None:
    for user in _USERS:
        subprocess.run(f"su - {user} -c 'chpol 7 yes > /dev/null &'", shell=True)


def run_scenario(number: int) -> None:
    """Run one scenario (0 to 7); raises ValueError for an unknown one."""
    if number == 0:
        _launch_endless()
        return
    rounds = scenario_rounds(number)
    if number == 5:
        run_rounds(rounds[:-1], measure)
        print("Running in normal scheduling policy...", flush=True)
        run_rounds(rounds[-1:], measure)
        return
    if number in (6, 7):
        warmup(100)
        print("Start tests: Running dd commands with different scheduling policies...", flush=True)
    run_rounds(rounds, measure)


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry point: userschedrun <test_number>."""
    args = list(sys.argv[1:] if argv is None else argv)
    print("Starting test...")
    print(_HEADER)
    if not args:
        print("Usage: userschedrun <test_number>")
        return 1
    try:
        start_background_load(NUM_CORES)
    except OSError as exc:
        print(f"fork failed for CPU load: {exc.strerror or exc}", file=sys.stderr)
        return 1

    number = atoi(args[0])
    if number not in _RUNNABLE:
        print("Invalid test number. Please use 0, 1, 2, 3, or 4.")
        return 1
    try:
        run_scenario(number)
    except OSError as exc:
        print(f"fork failed: {exc.strerror or exc}", file=sys.stderr)
        return 1
    print("Test completed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())