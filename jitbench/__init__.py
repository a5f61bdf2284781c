# jitbench/__init__.py

# Expose the core, user-facing components of the harness
# at the top-level package namespace.

from .config import (
    AccumulatorOverflowError,
    ConfigurationError,
    JitbenchError,
    TrialConfig,
)
from .workloads import (
    WorkloadSpec,
    constant_workload,
    recursive_workload,
    get_workload,
    register,
)
from .runner import TrialResult, run_benchmark, run_trial
from .reporter import TrialReporter
