# userschedbench

Tools for exercising a Linux kernel that has a per-user scheduling policy
(`SCHED_USER`, policy number 7) next to the standard policies, and for
measuring how commands behave under each of them.

Linux only. Changing to `SCHED_FIFO` or `SCHED_RR` needs root, and the
benchmark runner starts commands with `su`, so it is meant to run as root on a
test machine. The target system needs `chpol` on the `PATH` (it comes with this
package) and the test accounts `user1`, `user2` and `user3`.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Policy numbers

| Number | Policy        | Priority used |
|--------|---------------|---------------|
| 0      | `SCHED_OTHER` | 0             |
| 1      | `SCHED_FIFO`  | 50            |
| 2      | `SCHED_RR`    | 50            |
| 7      | `SCHED_USER`  | 0             |

Policy numbers are read like C's `atoi`: leading whitespace and a sign are
allowed, reading stops at the first non-digit, and text without digits reads
as 0.

## Commands

### chpol

Run a command under a scheduling policy and wait until it finishes:

```
chpol 7 yes
chpol 1 sha256sum some-file
```

If the policy number is not one of those above, `chpol` prints
`Invalid scheduling policy: <n>.` and exits with status 1. If the policy
cannot be set, the child reports `sched_setscheduler failed` and exits with
status 1.

### userschedtest

Start a child process that spins forever under the given policy. The child
prints its PID, and the parent prints the PID and policy and then waits for
it, so you can watch it in `top` or with `chrt -p`:

```
userschedtest 7
```

If the policy number is not known, `SCHED_USER` is used.

### userschedrun

Run one of the benchmark scenarios:

```
userschedrun 3
```

The runner prints a header line, then starts two background processes that
spin forever to load the CPU. These are not stopped when the runner finishes;
kill them yourself. Each measured command is run through
`su - <user> -c 'chpol <policy> <command> > /dev/null 2>&1'` in its own child
process, and the runner prints one CSV line for each measurement, followed by
a coloured progress bar with two `#` for every full second of elapsed time.

The columns are: iteration, elapsed time, user and system CPU time and
waiting time (in nanoseconds), CPU utilisation, voluntary and involuntary
context switches, user, scheduling policy and command.

Scenarios:

- `0`: endless `yes` processes under `SCHED_USER` for root, user1, user2 and user3
- `1`: one hashing job for each of four users, all at the same time
- `2`: two hashing jobs for each of four users
- `3`: a mix of CPU-heavy commands as root, three rounds
- `4`: the same mix, with 1 to 5 rounds for each pass
- `5`: an uneven mix of commands, three rounds, then one more run under `SCHED_FIFO` for comparison
- `6`: a warm-up of 100 small `dd` runs, then 100 rounds of `dd` jobs run in pairs under `SCHED_USER` and `SCHED_FIFO`

Jobs within a round run in parallel; rounds run one after another. Any other
number prints `Invalid test number.` and exits with status 1. A lighter
variant of scenario 6 is available as scenario 7 through
`userschedbench.runner.run_scenario(7)`, but not from the command.

## Library use

```python
from userschedbench.policy import parse_policy, SchedPolicy
from userschedbench.measure import build_command, progress_bar
from userschedbench.runner import scenario_rounds

policy = parse_policy("7")
assert policy is SchedPolicy.USER
print(build_command("root", "yes", policy))
# su - root -c 'chpol 7 yes > /dev/null 2>&1'

for job in scenario_rounds(1)[0]:
    print(job.user, job.cmd, job.policy)
```

- `userschedbench.policy`: `SchedPolicy`, `InvalidPolicyError`, `atoi`,
  `parse_policy`, `parse_policy_lenient`, `apply_policy`
- `userschedbench.measure`: `Measurement` (with `wait_ns`, `cpu_utilization`
  and `csv_line()`), `hash_str`, `progress_color`, `progress_bar`,
  `build_command`, `exec_cmd_user_pol`, `measure`, `measure_user`,
  `measure_normal`
- `userschedbench.runner`: `Job`, `scenario_rounds`, `warmup`, `run_rounds`,
  `start_background_load`, `run_scenario`, `main`

## What it does not do

The runner only prints its measurements. It does not store them, summarise
them or compare runs; collect the CSV lines from its output for that.