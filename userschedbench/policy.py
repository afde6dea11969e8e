"""Scheduling policies and their application to processes."""

from __future__ import annotations

import errno
import os
from enum import IntEnum

_RT_PRIORITY = 50


class InvalidPolicyError(ValueError):
    """Raised when a policy number names no known scheduling policy."""

    def __init__(self, number: int) -> None:
        super().__init__(f"Invalid scheduling policy: {number}.")
        self.number = number


class SchedPolicy(IntEnum):
    """Kernel scheduling policies understood by the tools."""

    OTHER = 0
    FIFO = 1
    RR = 2
    USER = 7

    def priority(self) -> int:
        """Static priority the policy needs: real-time policies get 50."""
        if self in (SchedPolicy.OTHER, SchedPolicy.USER):
            return 0
        return _RT_PRIORITY


def atoi(text: str) -> int:
    """Read a leading decimal integer the way the C library does; 0 if none."""
    stripped = text.lstrip(" \t\n\r\v\f")
    sign = 1
    if stripped[:1] in ("+", "-"):
        if stripped[0] == "-":
            sign = -1
        stripped = stripped[1:]
    digits = []
    for char in stripped:
        if not ("0" <= char <= "9"):
            break
        digits.append(char)
    if not digits:
        return 0
    return sign * int("".join(digits))


def parse_policy(text: str) -> SchedPolicy:
    """Parse a policy number, raising InvalidPolicyError for unknown ones."""
    number = atoi(text)
    try:
        return SchedPolicy(number)
    except ValueError:
        raise InvalidPolicyError(number) from None


def parse_policy_lenient(text: str) -> SchedPolicy:
    """Parse a policy number, falling back to SCHED_USER for unknown ones."""
    try:
        return parse_policy(text)
    except InvalidPolicyError:
        return SchedPolicy.USER


def apply_policy(policy: SchedPolicy, pid: int = 0) -> None:
    """Set the scheduling policy of a process (0 means the caller)."""
    if not hasattr(os, "sched_setscheduler"):
        raise OSError(errno.ENOSYS, "sched_setscheduler is not supported here")
    policy = SchedPolicy(policy)
    os.sched_setscheduler(pid, int(policy), os.sched_param(policy.priority()))