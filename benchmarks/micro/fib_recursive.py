# benchmarks/micro/fib_recursive.py
#
# Times 1000 calls of the doubly recursive Fibonacci workload on input 20,
# five times. Deep call trees make this a measure of call/return overhead
# in whatever runtime executes it. Every trial should report 6765000.

from jitbench import TrialConfig, TrialReporter, get_workload, run_benchmark

ITERATIONS = 1000
FIB_N = 20
RUNS = 5


def main():
    workload = get_workload("fib", FIB_N)
    config = TrialConfig(iterations_per_trial=ITERATIONS, trial_count=RUNS)
    TrialReporter().report(run_benchmark(workload, config))


if __name__ == "__main__":
    main()
