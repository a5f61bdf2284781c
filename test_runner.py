import functools
import os
import sys

import pytest

# Make the 'jitbench' package in the project directory importable,
# even if it's not formally installed yet.
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from jitbench import (
    AccumulatorOverflowError,
    ConfigurationError,
    TrialConfig,
    TrialResult,
    WorkloadSpec,
    get_workload,
    recursive_workload,
    run_benchmark,
    run_trial,
)
from jitbench.runner import apply_overflow_policy

INT64_MAX = 2**63 - 1
INT64_MIN = -2**63


def fake_clock(*readings):
    """A clock that returns the given readings in order."""
    it = iter(readings)
    return lambda: next(it)


def counting_workload(value=3):
    calls = []

    def compute(n):
        calls.append(n)
        return n

    return WorkloadSpec(name="count", input_value=value, compute=compute), calls


def test_run_trial_accumulates_k_times_result():
    total, elapsed_ms = run_trial(get_workload("fib", 10), 7)
    assert total == 7 * 55
    assert elapsed_ms >= 0


def test_run_trial_real_recursion():
    total, _ = run_trial(get_workload("fib", 20), 10)
    assert total == 67650


def test_run_trial_zero_iterations():
    workload, calls = counting_workload()
    total, elapsed_ms = run_trial(workload, 0)
    assert total == 0
    assert calls == []
    assert elapsed_ms >= 0


def test_run_trial_elapsed_from_clock():
    workload, _ = counting_workload()
    _, elapsed_ms = run_trial(workload, 2, clock=fake_clock(1.0, 1.25))
    assert elapsed_ms == pytest.approx(250.0)


def test_run_trial_elapsed_never_negative():
    workload, _ = counting_workload()
    _, elapsed_ms = run_trial(workload, 1, clock=fake_clock(5.0, 4.0))
    assert elapsed_ms == 0.0


def test_fib_scenario():
    # Cached so the protocol is exercised at full size without the
    # exponential cost; the summed values are the same.
    workload = WorkloadSpec("fib", 20, functools.lru_cache(maxsize=None)(recursive_workload))
    results = list(run_benchmark(workload, TrialConfig(iterations_per_trial=1000, trial_count=5)))
    assert [r.trial_index for r in results] == [1, 2, 3, 4, 5]
    assert all(r.accumulated_value == 6765000 for r in results)


def test_simple_add_scenario():
    results = list(run_benchmark(get_workload("simple_add"), TrialConfig(1000, 3)))
    assert [r.trial_index for r in results] == [1, 2, 3]
    assert all(r.accumulated_value == 7000 for r in results)
    assert all(r.elapsed_ms >= 0 for r in results)


def test_zero_trials_produces_nothing():
    run = run_benchmark(get_workload("simple_add"), TrialConfig(1000, 0))
    assert len(run) == 0
    assert list(run) == []


def test_zero_iterations_every_trial_is_zero():
    results = list(run_benchmark(get_workload("fib"), TrialConfig(0, 4)))
    assert len(results) == 4
    assert all(r.accumulated_value == 0 for r in results)


def test_trial_indices_are_sequential():
    results = list(run_benchmark(get_workload("simple_add"), TrialConfig(1, 12)))
    assert [r.trial_index for r in results] == list(range(1, 13))
    assert all(isinstance(r, TrialResult) for r in results)


def test_run_is_lazy():
    workload, calls = counting_workload()
    run = run_benchmark(workload, TrialConfig(5, 3))
    assert calls == []
    first = next(iter(run))
    assert first.trial_index == 1
    assert len(calls) == 5


def test_run_is_restartable_and_repeatable():
    run = run_benchmark(get_workload("fib", 12), TrialConfig(20, 3))
    first = [r.accumulated_value for r in run]
    second = [r.accumulated_value for r in run]
    assert first == second == [20 * 144] * 3


def test_warmup_trials_run_but_are_not_reported():
    workload, calls = counting_workload()
    results = list(run_benchmark(workload, TrialConfig(4, 3, warmup_trials=2)))
    assert len(results) == 3
    assert len(calls) == 4 * (2 + 3)
    assert [r.trial_index for r in results] == [1, 2, 3]


def test_trials_are_independent():
    clock = fake_clock(0.0, 0.001, 10.0, 10.003)
    workload, _ = counting_workload(value=2)
    results = list(run_benchmark(workload, TrialConfig(3, 2), clock=clock))
    assert [r.accumulated_value for r in results] == [6, 6]
    assert [round(r.elapsed_ms, 6) for r in results] == [1.0, 3.0]


def test_unknown_overflow_policy():
    with pytest.raises(ConfigurationError):
        run_benchmark(get_workload("fib"), TrialConfig(1, 1), overflow="wrap")


@pytest.mark.parametrize("policy", ["unbounded", "saturate", "error"])
def test_overflow_policy_in_range_is_identity(policy):
    assert apply_overflow_policy(12345, policy) == 12345
    assert apply_overflow_policy(INT64_MAX, policy) == INT64_MAX


def test_overflow_unbounded_keeps_big_ints():
    assert apply_overflow_policy(2**70, "unbounded") == 2**70


def test_overflow_saturate_clamps():
    assert apply_overflow_policy(2**63, "saturate") == INT64_MAX
    assert apply_overflow_policy(-2**70, "saturate") == INT64_MIN


def test_overflow_error_raises():
    with pytest.raises(AccumulatorOverflowError):
        apply_overflow_policy(2**63, "error")


def test_run_trial_overflow_policies():
    big = WorkloadSpec("big", 0, lambda n: 2**62)
    assert run_trial(big, 4)[0] == 2**64
    assert run_trial(big, 4, overflow="saturate")[0] == INT64_MAX
    with pytest.raises(AccumulatorOverflowError):
        run_trial(big, 4, overflow="error")
