"""
Scheduler Types

Type definitions for suite registration, benchmark results, progress
snapshots and the run report produced by the scheduler.
"""

from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable
from dataclasses import dataclass, field, asdict
from enum import Enum


class BenchmarkStatus(str, Enum):
    """Outcome of a single benchmark task."""
    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"
    SKIPPED = "skipped"


class BenchmarkPhase(str, Enum):
    """Phase a suite is in when it reports progress."""
    WARMUP = "warmup"
    RUNNING = "running"
    COMPLETE = "complete"


class SuiteStatus(str, Enum):
    """Final status of a suite in the run report."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class BenchmarkResult:
    """Result of one timed task, as produced by a Benchmark collaborator."""
    name: str
    ops_per_second: float
    avg_time: float
    iterations: int
    total_time: float
    min_time: float = 0.0
    max_time: float = 0.0
    std_dev: float = 0.0
    rme: float = 0.0
    status: Optional[BenchmarkStatus] = None
    error: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.status is not None and not isinstance(self.status, BenchmarkStatus):
            self.status = BenchmarkStatus(self.status)

    @property
    def is_failed(self) -> bool:
        return self.status == BenchmarkStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['status'] = self.status.value if self.status else None
        return data


@dataclass(frozen=True)
class ProgressSnapshot:
    """Progress reported by one suite (or the aggregate across suites)."""
    suite: str
    task: str
    current: int
    total: int
    percentage: float = 0.0
    phase: BenchmarkPhase = BenchmarkPhase.RUNNING


# The aggregate has the same shape as a single snapshot.
AggregateProgress = ProgressSnapshot

ProgressCallback = Callable[[ProgressSnapshot], None]


@runtime_checkable
class Benchmark(Protocol):
    """
    A suite's runnable collaborator.

    ``run`` may be a plain function or a coroutine function. Implementations
    may additionally provide ``set_progress_callback(callback)`` to stream
    ProgressSnapshot updates, and ``print_results()``.
    """

    def run(self) -> Any:
        ...


@dataclass
class SuiteConfig:
    """Registration record for one suite."""
    name: str
    benchmark: Any
    depends_on: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    def __post_init__(self):
        # ordered set semantics
        self.depends_on = list(dict.fromkeys(self.depends_on or []))
        self.tags = list(self.tags or [])


@dataclass
class SuiteReport:
    """One entry of RunReport.suites."""
    name: str
    results: List[BenchmarkResult]
    duration: float  # seconds
    timestamp: float  # epoch seconds at completion
    start_time: float
    end_time: float
    status: SuiteStatus = SuiteStatus.SUCCESS
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == SuiteStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'results': [r.to_dict() for r in self.results],
            'duration': self.duration,
            'timestamp': self.timestamp,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'status': self.status.value,
            'error': self.error,
        }


@dataclass
class RunReport:
    """Scheduler output: suite reports in completion order plus metadata."""
    name: str
    suites: List[SuiteReport] = field(default_factory=list)
    generated_at: Optional[str] = None
    environment: Dict[str, Any] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    def get_suite(self, name: str) -> Optional[SuiteReport]:
        for suite in self.suites:
            if suite.name == name:
                return suite
        return None

    @property
    def failed_suites(self) -> List[str]:
        return [s.name for s in self.suites if not s.success]

    @property
    def total_tasks(self) -> int:
        return sum(len(s.results) for s in self.suites)

    @property
    def total_duration(self) -> float:
        return sum(s.duration for s in self.suites)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'suites': [s.to_dict() for s in self.suites],
            'generated_at': self.generated_at,
            'environment': dict(self.environment),
            'skipped': list(self.skipped),
        }
