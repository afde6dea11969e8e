"""Timing and resource measurement of commands run as other users."""

from __future__ import annotations

import math
import resource
import subprocess
import time
from dataclasses import dataclass

from .policy import SchedPolicy

_NS_PER_SEC = 1_000_000_000
_COLORS = (31, 32, 33, 34, 35, 36, 91, 92)
_HASH_MASK = (1 << 64) - 1
_MAX_LABEL = 255
_MAX_COMMAND = 511


@dataclass(frozen=True)
class Measurement:
    """Resource usage of one measured command."""

    iteration: int
    elapsed_ns: int
    utime_ns: int
    stime_ns: int
    voluntary_switches: int
    involuntary_switches: int
    user: str
    policy: int
    cmd: str

    @property
    def wait_ns(self) -> int:
        return self.elapsed_ns - (self.utime_ns + self.stime_ns)

    @property
    def cpu_utilization(self) -> float:
        busy = self.utime_ns + self.stime_ns
        if self.elapsed_ns == 0:
            if busy == 0:
                return math.nan
            return math.copysign(math.inf, busy)
        return busy / self.elapsed_ns * 100.0

    def csv_line(self) -> str:
        """One result row in the report's column order."""
        return (
            f"{self.iteration}, {self.elapsed_ns}, {self.utime_ns}, {self.stime_ns} , "
            f"{self.wait_ns}, {self.cpu_utilization:f}%, {self.voluntary_switches}, "
            f"{self.involuntary_switches}, {self.user}, {int(self.policy)}, {self.cmd}"
        )


def hash_str(text: str) -> int:
    """djb2 hash over the text's bytes (signed chars), kept to 64 bits."""
    value = 5381
    for byte in text.encode():
        char = byte - 256 if byte > 127 else byte
        value = (value * 33 + char) & _HASH_MASK
    return value


def progress_color(cmd: str, policy: int) -> int:
    """ANSI colour code chosen from the command and its policy."""
    label = f"{cmd} {int(policy)}"[:_MAX_LABEL]
    return _COLORS[hash_str(label) % len(_COLORS)]


def progress_bar(elapsed_ns: int, cmd: str, policy: int) -> str:
    """Coloured bar with two marks per whole elapsed second."""
    marks = max(0, int(elapsed_ns / _NS_PER_SEC) * 2)
    return f"\033[{progress_color(cmd, policy)}m" + "#" * marks + "\033[0m"


def build_command(user: str, cmd: str, policy: int) -> str:
    """Shell line running cmd as user under the given policy, output discarded."""
    line = f"su - {user} -c 'chpol {int(policy)} {cmd} > /dev/null 2>&1'"
    return line[:_MAX_COMMAND]


def exec_cmd_user_pol(user: str, cmd: str, policy: int) -> int:
    """Run cmd as user under the policy through the shell; return its status."""
    completed = subprocess.run(build_command(user, cmd, policy), shell=True)
    return completed.returncode


def _seconds_to_ns(seconds: float) -> int:
    return round(seconds * 1_000_000) * 1000


def measure(user: str, cmd: str, iteration: int, policy: int) -> Measurement:
    """Run and time a command, print its result row and progress bar."""
    before = resource.getrusage(resource.RUSAGE_SELF)
    start = time.monotonic_ns()
    exec_cmd_user_pol(user, cmd, policy)
    end = time.monotonic_ns()
    after = resource.getrusage(resource.RUSAGE_SELF)

    result = Measurement(
        iteration=iteration,
        elapsed_ns=end - start,
        utime_ns=_seconds_to_ns(after.ru_utime) - _seconds_to_ns(before.ru_utime),
        stime_ns=_seconds_to_ns(after.ru_stime) - _seconds_to_ns(before.ru_stime),
        voluntary_switches=after.ru_nvcsw - before.ru_nvcsw,
        involuntary_switches=after.ru_nivcsw - before.ru_nivcsw,
        user=user,
        policy=int(policy),
        cmd=cmd,
    )
    print(result.csv_line())
    print(progress_bar(result.elapsed_ns, cmd, policy), flush=True)
    return result


def measure_user(user: str, cmd: str, iteration: int) -> Measurement:
    """Measure cmd under SCHED_USER."""
    return measure(user, cmd, iteration, SchedPolicy.USER)


def measure_normal(user: str, cmd: str, iteration: int) -> Measurement:
    """Measure cmd under the comparison policy, SCHED_FIFO."""
    return measure(user, cmd, iteration, SchedPolicy.FIFO)