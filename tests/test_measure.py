import math
import subprocess
from unittest import mock

import pytest

from userschedbench.measure import (
    Measurement,
    build_command,
    exec_cmd_user_pol,
    hash_str,
    measure,
    measure_normal,
    measure_user,
    progress_bar,
    progress_color,
)

COLORS = {31, 32, 33, 34, 35, 36, 91, 92}


@pytest.fixture
def fake_run():
    with mock.patch(
        "userschedbench.measure.subprocess.run",
        side_effect=lambda line, shell: subprocess.CompletedProcess(line, 0),
    ) as run:
        yield run


def test_hash_empty_is_seed():
    assert hash_str("") == 5381


def test_hash_step_invariant():
    for prefix, char in [("abc", "d"), ("yes 7", "x"), ("", "q")]:
        assert hash_str(prefix + char) == (hash_str(prefix) * 33 + ord(char)) % 2**64


def test_hash_stays_in_64_bits():
    assert 0 <= hash_str("dd if=/dev/urandom of=/dev/null bs=1M count=333" * 20) < 2**64


def test_progress_color_is_deterministic_and_valid():
    color = progress_color("yes", 7)
    assert color in COLORS
    assert color == progress_color("yes", 7)


def test_progress_bar_counts_whole_seconds():
    bar = progress_bar(3_500_000_000, "yes", 7)
    assert bar.count("#") == 2 * 3
    assert bar.startswith(f"\033[{progress_color('yes', 7)}m")
    assert bar.endswith("\033[0m")
    assert progress_bar(999_999_999, "yes", 7).count("#") == 0


def test_build_command():
    assert build_command("user1", "yes", 7) == "su - user1 -c 'chpol 7 yes > /dev/null 2>&1'"


def test_build_command_is_bounded():
    assert len(build_command("root", "x" * 1000, 1)) == 511


def test_csv_line():
    m = Measurement(2, 1000, 200, 300, 4, 5, "root", 7, "yes")
    assert m.wait_ns == 500
    assert m.csv_line() == "2, 1000, 200, 300 , 500, 50.000000%, 4, 5, root, 7, yes"


def test_cpu_utilization_zero_elapsed():
    m = Measurement(0, 0, 0, 0, 0, 0, "root", 7, "yes")
    assert m.wait_ns == 0
    assert math.isnan(m.cpu_utilization) is True


def test_exec_cmd_user_pol_runs_shell(fake_run):
    assert exec_cmd_user_pol("user2", "yes", 1) == 0
    fake_run.assert_called_once_with(build_command("user2", "yes", 1), shell=True)


def test_measure_prints_row_and_bar(fake_run, capsys):
    result = measure("user3", "yes", 4, 7)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == result.csv_line()
    assert lines[1] == progress_bar(result.elapsed_ns, "yes", 7)
    assert (result.iteration, result.user, result.policy, result.cmd) == (4, "user3", 7, "yes")
    assert result.elapsed_ns >= 0


def test_measure_user_and_normal_policies(fake_run, capsys):
    assert measure_user("root", "yes", 0).policy == 7
    assert measure_normal("root", "yes", 0).policy == 1
    commands = [c.args[0] for c in fake_run.call_args_list]
    assert commands == [build_command("root", "yes", 7), build_command("root", "yes", 1)]