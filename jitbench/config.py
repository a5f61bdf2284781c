# jitbench/config.py
#
# Run configuration for the harness. A run is described by a TrialConfig
# (how many workload calls per trial, how many trials) plus the workload's
# input value and the clock used for timing. Values come from the
# registered workload defaults, optionally overridden by the environment
# and then by explicit options (e.g. command-line flags). Everything here
# is validated once, at startup, before any trial runs.

import os
import time
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

# Environment variables read at startup.
ENV_ITERATIONS = "JITBENCH_ITERATIONS"
ENV_TRIALS = "JITBENCH_TRIALS"
ENV_INPUT_SIZE = "JITBENCH_INPUT_SIZE"
ENV_WARMUP = "JITBENCH_WARMUP"
ENV_CLOCK = "JITBENCH_CLOCK"
ENV_LOG_LEVEL = "JITBENCH_LOG_LEVEL"

DEFAULT_CLOCK = "perf_counter"

# Clocks that measure elapsed wall time; process_time and thread_time count
# CPU time and are rejected.
WALL_CLOCKS = ("perf_counter", "monotonic")

_ENV_OPTIONS = {
    ENV_ITERATIONS: "iterations",
    ENV_TRIALS: "trials",
    ENV_INPUT_SIZE: "inputSize",
    ENV_WARMUP: "warmup",
    ENV_CLOCK: "clock",
}

# Option keys accepted by `resolve_settings`; `input_size` is an alias.
RECOGNIZED_OPTIONS = ("iterations", "trials", "inputSize", "input_size", "warmup", "clock")


class JitbenchError(Exception):
    """Base class for all harness errors."""


class ConfigurationError(JitbenchError, ValueError):
    """A run cannot start because its configuration is invalid."""


class AccumulatorOverflowError(JitbenchError, OverflowError):
    """The accumulated value left the signed 64-bit range."""


def parse_count(key: str, raw) -> int:
    """
    Converts an option value into a non-negative integer.

    Strings are accepted so that environment values can be passed through
    unchanged. Booleans are rejected even though they are ints.
    """
    if isinstance(raw, bool):
        raise ConfigurationError(f"'{key}' must be an integer, got {raw!r}")
    if isinstance(raw, str):
        try:
            value = int(raw.strip())
        except ValueError:
            raise ConfigurationError(f"'{key}' must be an integer, got {raw!r}") from None
    elif isinstance(raw, int):
        value = raw
    else:
        raise ConfigurationError(f"'{key}' must be an integer, got {raw!r}")

    if value < 0:
        raise ConfigurationError(f"'{key}' must not be negative, got {value}")
    return value


@dataclass(frozen=True)
class TrialConfig:
    """
    How a run is shaped: `iterations_per_trial` workload calls per trial,
    `trial_count` timed trials, preceded by `warmup_trials` untimed ones.
    """
    iterations_per_trial: int
    trial_count: int
    warmup_trials: int = 0

    def __post_init__(self):
        for key, value in (("iterations", self.iterations_per_trial),
                           ("trials", self.trial_count),
                           ("warmup", self.warmup_trials)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"'{key}' must be an integer, got {value!r}")
            if value < 0:
                raise ConfigurationError(f"'{key}' must not be negative, got {value}")

    @classmethod
    def from_options(cls, options: Mapping, base: Optional["TrialConfig"] = None) -> "TrialConfig":
        """
        Builds a TrialConfig from an option mapping such as
        `{'iterations': 1000, 'trials': 5}`, falling back to `base` for
        anything not given. Keys that do not shape trials are ignored here.
        """
        fields = {}
        if base is not None:
            fields = {
                "iterations_per_trial": base.iterations_per_trial,
                "trial_count": base.trial_count,
                "warmup_trials": base.warmup_trials,
            }
        if options.get("iterations") is not None:
            fields["iterations_per_trial"] = parse_count("iterations", options["iterations"])
        if options.get("trials") is not None:
            fields["trial_count"] = parse_count("trials", options["trials"])
        if options.get("warmup") is not None:
            fields["warmup_trials"] = parse_count("warmup", options["warmup"])

        missing = {"iterations_per_trial", "trial_count"} - set(fields)
        if missing:
            raise ConfigurationError(f"Missing trial settings: {', '.join(sorted(missing))}")
        return cls(**fields)


def resolve_clock(name: str = DEFAULT_CLOCK) -> Callable[[], float]:
    """
    Looks up a clock function in the `time` module by name. Only monotonic
    wall-clock sources are accepted: a clock that is missing, can jump
    backwards or counts CPU time instead of elapsed time is a fatal
    configuration error.
    """
    try:
        info = time.get_clock_info(name)
    except (ValueError, TypeError):
        raise ConfigurationError(f"Unknown clock source: {name!r}") from None

    if name not in WALL_CLOCKS or not info.monotonic:
        raise ConfigurationError(
            f"Clock source {name!r} is not a monotonic wall clock. "
            f"Expected one of: {', '.join(WALL_CLOCKS)}"
        )

    clock = getattr(time, name, None)
    if not callable(clock):
        raise ConfigurationError(f"Clock source {name!r} is not available on this platform")
    return clock


def read_environment(environ: Optional[Mapping[str, str]] = None) -> dict:
    """Collects option overrides from JITBENCH_* environment variables."""
    if environ is None:
        environ = os.environ
    options = {}
    for env_name, key in _ENV_OPTIONS.items():
        value = environ.get(env_name)
        if value is not None and value.strip() != "":
            options[key] = value.strip()
    return options


@dataclass(frozen=True)
class RunSettings:
    """Everything needed to start a run, after all overrides are applied."""
    trial_config: TrialConfig
    input_value: int
    clock_name: str = DEFAULT_CLOCK
    clock: Callable[[], float] = field(default=time.perf_counter, repr=False, compare=False)


def resolve_settings(defaults: TrialConfig, default_input: int,
                     options: Optional[Mapping] = None,
                     environ: Optional[Mapping[str, str]] = None) -> RunSettings:
    """
    Merges workload defaults, environment overrides and explicit options
    (in that order of precedence, lowest first) into RunSettings.

    Options left as None do not override anything, so unset argparse
    flags can be passed straight through.
    """
    options = dict(options or {})
    unknown = sorted(k for k in options if k not in RECOGNIZED_OPTIONS)
    if unknown:
        raise ConfigurationError(f"Unrecognized option(s): {', '.join(unknown)}")
    alias = options.pop("input_size", None)
    if options.get("inputSize") is None:
        options["inputSize"] = alias

    merged = read_environment(environ)
    merged.update({k: v for k, v in options.items() if v is not None})

    trial_config = TrialConfig.from_options(merged, base=defaults)

    input_value = default_input
    if merged.get("inputSize") is not None:
        input_value = parse_count("inputSize", merged["inputSize"])

    clock_name = merged.get("clock") or DEFAULT_CLOCK
    clock = resolve_clock(clock_name)

    return RunSettings(trial_config=trial_config, input_value=input_value,
                       clock_name=clock_name, clock=clock)
