# examples/custom_workload.py

from jitbench import TrialConfig, TrialReporter, get_workload, register, run_benchmark


@register("triangle", input_value=300, iterations=200, trials=3)
def triangle(n):
    """Recursive triangular number: one call per level instead of two."""
    if n <= 1:
        return n
    return n + triangle(n - 1)


def main():
    """Runs the demonstration."""
    print("--- Running Custom Workload Demonstration ---")

    workload = get_workload("triangle")
    config = TrialConfig(iterations_per_trial=200, trial_count=3)

    expected = 200 * (300 * 301 // 2)
    print(f"\nEach trial should accumulate {expected}.")

    reported = TrialReporter(fmt="table").report(run_benchmark(workload, config))
    assert reported == 3, "Expected one line per trial!"

    print("\n--- Custom Workload Demonstration Complete ---")


if __name__ == "__main__":
    main()
