# benchmarks/micro/simple_add.py
#
# Baseline for fib_recursive.py: the same loop over a function whose body
# is a single comparison and addition, so the timing is dominated by call
# and loop overhead. Every trial should report 7000.

from jitbench import TrialConfig, TrialReporter, get_workload, run_benchmark

ITERATIONS = 1000
TEST_N = 5
RUNS = 3


def main():
    workload = get_workload("simple_add", TEST_N)
    config = TrialConfig(iterations_per_trial=ITERATIONS, trial_count=RUNS)
    TrialReporter().report(run_benchmark(workload, config))


if __name__ == "__main__":
    main()
