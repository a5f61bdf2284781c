# jitbench/tools/bench_cli.py
#
# Implements the command-line interface for `jitbench`. With no arguments
# it runs the fixed configuration of the default workload; flags and
# JITBENCH_* environment variables can override the counts and input.

import argparse
import os
import sys

from ..config import (
    ENV_LOG_LEVEL,
    AccumulatorOverflowError,
    ConfigurationError,
    JitbenchError,
    resolve_settings,
)
from ..logger import get_logger, setup_logging
from ..reporter import REPORT_FORMATS, TrialReporter
from ..runner import OVERFLOW_POLICIES, check_overflow_policy, run_benchmark
from ..workloads import available_workloads, default_config, default_input, get_workload

logger = get_logger(__name__)

DEFAULT_WORKLOAD = "fib"

EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser():
    parser = argparse.ArgumentParser(
        prog="jitbench",
        description="Time repeated calls of a synthetic workload over several trials."
    )
    parser.add_argument(
        "workload",
        nargs="?",
        default=DEFAULT_WORKLOAD,
        help=f"The workload to run (default: {DEFAULT_WORKLOAD}). Use --list to see all."
    )
    parser.add_argument("--iterations", type=int, help="Workload calls per trial.")
    parser.add_argument("--trials", type=int, help="Number of timed trials.")
    parser.add_argument("--input-size", dest="input_size", type=int, help="Input passed to the workload.")
    parser.add_argument("--warmup", type=int, help="Untimed trials run before the first timed one.")
    parser.add_argument("--clock", help="Name of the monotonic clock in the `time` module (default: perf_counter).")
    parser.add_argument("--format", dest="fmt", choices=REPORT_FORMATS, default="text",
                        help="Report layout.")
    parser.add_argument("--overflow", choices=OVERFLOW_POLICIES, default="unbounded",
                        help="What to do when the accumulator leaves the int64 range.")
    parser.add_argument("--log-level", dest="log_level", help="Diagnostic log level (default: WARNING).")
    parser.add_argument("--list", action="store_true", help="List the available workloads and exit.")
    return parser


def list_workloads(stream=None):
    stream = stream if stream is not None else sys.stdout
    for name in available_workloads():
        spec = get_workload(name)
        config = default_config(name)
        print(f"{name:<12} input={spec.input_value:<4} iterations={config.iterations_per_trial:<6} "
              f"trials={config.trial_count:<3} {spec.description}", file=stream)


def main(argv=None, environ=None):
    args = build_parser().parse_args(argv)
    environ = os.environ if environ is None else environ

    try:
        setup_logging(args.log_level or environ.get(ENV_LOG_LEVEL) or "WARNING")
    except ConfigurationError as e:
        setup_logging("WARNING")
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG_ERROR

    if args.list:
        list_workloads()
        return EXIT_OK

    # Everything is validated before the first trial so that a bad
    # configuration produces no trial output at all.
    try:
        settings = resolve_settings(
            default_config(args.workload),
            default_input(args.workload),
            options={
                "iterations": args.iterations,
                "trials": args.trials,
                "inputSize": args.input_size,
                "warmup": args.warmup,
                "clock": args.clock,
            },
            environ=environ,
        )
        overflow = check_overflow_policy(args.overflow)
        workload = get_workload(args.workload, settings.input_value)
        reporter = TrialReporter(fmt=args.fmt)
    except JitbenchError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG_ERROR

    try:
        reporter.report(run_benchmark(workload, settings.trial_config, clock=settings.clock, overflow=overflow))
    except AccumulatorOverflowError as e:
        logger.error("Run aborted: %s", e)
        return EXIT_RUN_FAILED
    except RecursionError:
        logger.error(
            "Run aborted: workload '%s' exceeded the recursion limit (%d) at input %d",
            workload.name, sys.getrecursionlimit(), workload.input_value,
        )
        return EXIT_RUN_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
