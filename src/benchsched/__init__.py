"""
benchsched

Dependency-aware parallel scheduler for benchmark suites.
"""

from .core.config import ParallelConfig
from .core.exceptions import (
    BenchSchedException,
    CyclicDependencyError,
    DuplicateSuiteError,
    SuiteExecutionError,
    SuiteTimeoutError,
    UnknownDependencyError,
)
from .scheduler import (
    BenchmarkResult,
    FunctionBenchmark,
    ParallelBenchmarkRunner,
    ProgressSnapshot,
    RunnerOptions,
    RunReport,
    SuiteConfig,
    create_parallel_runner,
)

__version__ = "0.1.0"

__all__ = [
    "ParallelConfig",
    "BenchSchedException",
    "CyclicDependencyError",
    "DuplicateSuiteError",
    "SuiteExecutionError",
    "SuiteTimeoutError",
    "UnknownDependencyError",
    "BenchmarkResult",
    "FunctionBenchmark",
    "ParallelBenchmarkRunner",
    "ProgressSnapshot",
    "RunnerOptions",
    "RunReport",
    "SuiteConfig",
    "create_parallel_runner",
]
