# jitbench/workloads.py
#
# Defines the synthetic workloads measured by the harness and the registry
# that maps a workload name to its function, its fixed input and its
# default trial configuration.
#
# Both workloads are pure: the same input always produces the same integer,
# so repeated calls within and across trials are directly comparable.

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .config import ConfigurationError, TrialConfig, parse_count


@dataclass(frozen=True)
class WorkloadSpec:
    """A named pure function together with the input it is benchmarked on."""
    name: str
    input_value: int
    compute: Callable[[int], int] = field(repr=False)
    description: str = ""

    def __call__(self) -> int:
        return self.compute(self.input_value)


# name -> (function, default input, default trial config, description)
_REGISTRY: Dict[str, Tuple[Callable[[int], int], int, TrialConfig, str]] = {}


def register(name: str, input_value: int, iterations: int, trials: int, description: str = ""):
    """
    A decorator that registers a workload function under `name` with the
    input and trial counts it runs with when nothing is overridden.

    The decorated function is returned unchanged, so it can still be
    called directly.
    """
    defaults = TrialConfig(iterations_per_trial=iterations, trial_count=trials)
    parse_count("inputSize", input_value)

    def decorator(func):
        if name in _REGISTRY:
            raise ValueError(f"Workload '{name}' is already registered.")
        summary = description or (func.__doc__ or "").strip().split("\n")[0]
        _REGISTRY[name] = (func, input_value, defaults, summary)
        return func
    return decorator


@register("fib", input_value=20, iterations=1000, trials=5,
          description="Doubly recursive Fibonacci (call/return heavy)")
def recursive_workload(n: int) -> int:
    """
    Classic doubly recursive Fibonacci. The exponential call tree is the
    point: it stresses call and return overhead, so do not memoize or
    rewrite this iteratively.
    """
    if n <= 1:
        return n
    return recursive_workload(n - 1) + recursive_workload(n - 2)


@register("simple_add", input_value=5, iterations=1000, trials=3,
          description="Constant-time arithmetic (call overhead baseline)")
def constant_workload(n: int) -> int:
    """Constant-time baseline: n for n <= 1, otherwise n + 2."""
    if n <= 1:
        return n
    return n + 2


def available_workloads() -> List[str]:
    """Names of all registered workloads, in registration order."""
    return list(_REGISTRY)


def _lookup(name: str):
    try:
        return _REGISTRY[name]
    except KeyError:
        known = ", ".join(available_workloads())
        raise ConfigurationError(f"Unknown workload '{name}'. Available: {known}") from None


def get_workload(name: str, input_value: Optional[int] = None) -> WorkloadSpec:
    """
    Builds the WorkloadSpec for a registered workload.

    Args:
        name: The registered workload name (e.g. 'fib').
        input_value: Overrides the registered input when given.
    """
    func, default_input, _, description = _lookup(name)
    if input_value is None:
        input_value = default_input
    else:
        input_value = parse_count("inputSize", input_value)
    return WorkloadSpec(name=name, input_value=input_value, compute=func, description=description)


def default_input(name: str) -> int:
    return _lookup(name)[1]


def default_config(name: str) -> TrialConfig:
    """The fixed trial configuration a workload runs with by default."""
    return _lookup(name)[2]
