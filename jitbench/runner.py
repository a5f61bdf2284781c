# jitbench/runner.py
#
# The trial runner. A trial calls a workload a fixed number of times, sums
# the results into an accumulator and times the whole batch with a
# monotonic clock. A benchmark run repeats that for a fixed number of
# trials, producing one TrialResult per trial, strictly in order.
#
# The accumulator exists only so every call's result is consumed; an
# optimizing runtime cannot drop calls whose value ends up in the report.

import time
from dataclasses import dataclass
from typing import Callable, Iterator, Tuple

import numpy as np

from .config import AccumulatorOverflowError, ConfigurationError, TrialConfig
from .logger import get_logger
from .workloads import WorkloadSpec

logger = get_logger(__name__)

OVERFLOW_POLICIES = ("unbounded", "saturate", "error")

_INT64 = np.iinfo(np.int64)


@dataclass(frozen=True)
class TrialResult:
    """One completed trial: its 1-based index, the accumulator and the elapsed time."""
    trial_index: int
    accumulated_value: int
    elapsed_ms: float


def check_overflow_policy(policy: str) -> str:
    if policy not in OVERFLOW_POLICIES:
        raise ConfigurationError(
            f"Unknown overflow policy {policy!r}. Expected one of: {', '.join(OVERFLOW_POLICIES)}"
        )
    return policy


def apply_overflow_policy(total: int, policy: str = "unbounded") -> int:
    """
    Applies the accumulator overflow policy against the signed 64-bit range.

    'unbounded' returns Python's arbitrary-precision total untouched,
    'saturate' clamps it to the int64 range and 'error' raises
    AccumulatorOverflowError when it falls outside.
    """
    if policy == "unbounded":
        return total
    lo, hi = int(_INT64.min), int(_INT64.max)
    if lo <= total <= hi:
        return total
    if policy == "saturate":
        return hi if total > hi else lo
    if policy == "error":
        raise AccumulatorOverflowError(
            f"Accumulated value {total} is outside the int64 range [{lo}, {hi}]"
        )
    raise ConfigurationError(f"Unknown overflow policy {policy!r}")


def run_trial(workload: WorkloadSpec, iterations_per_trial: int,
              clock: Callable[[], float] = time.perf_counter,
              overflow: str = "unbounded") -> Tuple[int, float]:
    """
    Runs and times one trial.

    Args:
        workload: The workload to call, with its fixed input.
        iterations_per_trial (int): Number of workload calls in the batch.
        clock: A monotonic clock returning seconds.
        overflow (str): Accumulator overflow policy, see `apply_overflow_policy`.

    Returns:
        A tuple of (accumulated value, elapsed time in milliseconds).
    """
    compute = workload.compute
    value = workload.input_value

    start_time = clock()
    total = 0
    for _ in range(iterations_per_trial):
        total += compute(value)
    end_time = clock()

    # Deterministic workloads add the same value on every call, so the
    # final total is the extreme; checking it once matches checking each add.
    total = apply_overflow_policy(total, overflow)
    elapsed_ms = max(0.0, (end_time - start_time) * 1000)
    return total, elapsed_ms


class BenchmarkRun:
    """
    A lazy, finite, restartable sequence of TrialResults.

    Nothing runs until the object is iterated. Each iteration pass runs
    the warm-up batches and then every trial from scratch, so iterating
    twice measures twice.
    """
    def __init__(self, workload: WorkloadSpec, trial_config: TrialConfig,
                 clock: Callable[[], float] = time.perf_counter,
                 overflow: str = "unbounded"):
        self.workload = workload
        self.trial_config = trial_config
        self.clock = clock
        self.overflow = check_overflow_policy(overflow)

    def __len__(self):
        return self.trial_config.trial_count

    def __iter__(self) -> Iterator[TrialResult]:
        config = self.trial_config
        logger.info(
            "Starting '%s' (input=%d): %d trial(s) x %d iteration(s), %d warm-up",
            self.workload.name, self.workload.input_value,
            config.trial_count, config.iterations_per_trial, config.warmup_trials,
        )

        # Warm-up runs
        for _ in range(config.warmup_trials):
            run_trial(self.workload, config.iterations_per_trial, self.clock, self.overflow)

        # Timed runs
        for trial_index in range(1, config.trial_count + 1):
            total, elapsed_ms = run_trial(
                self.workload, config.iterations_per_trial, self.clock, self.overflow
            )
            logger.debug("Trial %d finished in %.3f ms", trial_index, elapsed_ms)
            yield TrialResult(trial_index=trial_index, accumulated_value=total, elapsed_ms=elapsed_ms)

        logger.info("Finished '%s' after %d trial(s)", self.workload.name, config.trial_count)

    def __repr__(self):
        return (f"BenchmarkRun(workload={self.workload.name!r}, "
                f"trials={self.trial_config.trial_count}, "
                f"iterations={self.trial_config.iterations_per_trial})")


def run_benchmark(workload: WorkloadSpec, trial_config: TrialConfig,
                  clock: Callable[[], float] = time.perf_counter,
                  overflow: str = "unbounded") -> BenchmarkRun:
    """
    Prepares a benchmark run. Trials execute as the returned object is
    iterated, one at a time, in index order.
    """
    return BenchmarkRun(workload, trial_config, clock=clock, overflow=overflow)
