"""
Suite Scheduler Module

Dependency-aware parallel scheduling of benchmark suites: graph resolution,
the permit gate, progress aggregation, the scheduling loop and the runner
facade.
"""

from .types import (
    AggregateProgress,
    Benchmark,
    BenchmarkPhase,
    BenchmarkResult,
    BenchmarkStatus,
    ProgressSnapshot,
    RunReport,
    SuiteConfig,
    SuiteReport,
    SuiteStatus,
)
from .graph import DependencyGraph, topological_sort, get_executable_suites
from .gate import BoundedGate
from .progress import ProgressAggregator
from .loop import ExecutionState, SchedulerHooks, SchedulerState, SchedulingLoop
from .runner import ParallelBenchmarkRunner, RunnerOptions, create_parallel_runner
from .benchmark import FunctionBenchmark
from .environment import EnvironmentCollector
from .thresholds import Threshold, check_thresholds

__all__ = [
    "AggregateProgress",
    "Benchmark",
    "BenchmarkPhase",
    "BenchmarkResult",
    "BenchmarkStatus",
    "ProgressSnapshot",
    "RunReport",
    "SuiteConfig",
    "SuiteReport",
    "SuiteStatus",
    "DependencyGraph",
    "topological_sort",
    "get_executable_suites",
    "BoundedGate",
    "ProgressAggregator",
    "ExecutionState",
    "SchedulerHooks",
    "SchedulerState",
    "SchedulingLoop",
    "ParallelBenchmarkRunner",
    "RunnerOptions",
    "create_parallel_runner",
    "FunctionBenchmark",
    "EnvironmentCollector",
    "Threshold",
    "check_thresholds",
]
