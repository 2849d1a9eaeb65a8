"""
Scheduling Loop

Drives one run: validates the suite set, dispatches ready suites while
permits are available, reacts to completions, and assembles the RunReport.
Only the loop mutates ExecutionState, the permit gate and the progress
table, so no locking is needed even with many suites in flight.
"""

import asyncio
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from ..core.exceptions import (
    SchedulerStateError,
    SuiteExecutionError,
    ValidationError,
)
from ..utils.async_helpers import (
    call_maybe_async,
    call_with_deadline,
    cancel_tasks,
    create_task_with_name,
)
from ..utils.logging import get_logger, get_suite_logger
from .gate import BoundedGate
from .graph import DependencyGraph
from .progress import ProgressAggregator
from .types import (
    BenchmarkPhase,
    BenchmarkResult,
    ProgressSnapshot,
    RunReport,
    SuiteConfig,
    SuiteReport,
    SuiteStatus,
)

logger = get_logger(__name__)

SuiteStartHook = Callable[[str], None]
SuiteCompleteHook = Callable[[str, List[BenchmarkResult]], None]
EnvironmentProvider = Callable[[], Dict[str, Any]]


class SchedulerState(str, Enum):
    """States of a scheduling run."""
    IDLE = "idle"
    VALIDATING = "validating"
    DISPATCHING = "dispatching"
    AWAITING_COMPLETION = "awaiting_completion"
    DRAINING = "draining"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class ExecutionState:
    """Per-run bookkeeping; the three name sets are always disjoint."""
    pending: Set[str] = field(default_factory=set)
    running: Set[str] = field(default_factory=set)
    completed: Set[str] = field(default_factory=set)
    start_times: Dict[str, float] = field(default_factory=dict)
    end_times: Dict[str, float] = field(default_factory=dict)
    max_observed_running: int = 0

    @property
    def total_count(self) -> int:
        return len(self.pending) + len(self.running) + len(self.completed)

    def copy(self) -> "ExecutionState":
        return ExecutionState(
            pending=set(self.pending),
            running=set(self.running),
            completed=set(self.completed),
            start_times=dict(self.start_times),
            end_times=dict(self.end_times),
            max_observed_running=self.max_observed_running,
        )


@dataclass
class SchedulerHooks:
    """Observer callbacks invoked from the loop's own context."""
    on_suite_start: Optional[SuiteStartHook] = None
    on_suite_complete: Optional[SuiteCompleteHook] = None


@dataclass
class _SuiteOutcome:
    name: str
    results: List[BenchmarkResult]
    start_time: float
    end_time: float
    error: Optional[BaseException] = None
    failure_message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.failure_message is not None


class SchedulingLoop:
    """Orchestrates a single run over a fixed list of suites."""

    def __init__(self,
                 suites: List[SuiteConfig],
                 max_workers: int,
                 continue_on_error: bool = False,
                 progress: Optional[ProgressAggregator] = None,
                 hooks: Optional[SchedulerHooks] = None,
                 timeout: Optional[float] = None,
                 report_name: str = "Benchmark Report",
                 environment_provider: Optional[EnvironmentProvider] = None):
        """
        Initialize the loop.

        Args:
            suites: Suites in registration order
            max_workers: Concurrency ceiling (>= 1)
            continue_on_error: Keep scheduling after a suite fails
            progress: Aggregator receiving per-suite snapshots
            hooks: Suite start/complete observers
            timeout: Optional per-suite timeout in seconds
            report_name: Name embedded in the RunReport
            environment_provider: Returns environment metadata for the report
        """
        self.suites = list(suites)
        self.max_workers = max_workers
        self.continue_on_error = continue_on_error
        self.progress = progress or ProgressAggregator()
        self.hooks = hooks or SchedulerHooks()
        self.timeout = timeout
        self.report_name = report_name
        self.environment_provider = environment_provider

        self.state = SchedulerState.IDLE
        self.execution = ExecutionState(pending={s.name for s in self.suites})
        self.graph: Optional[DependencyGraph] = None

        self._gate = BoundedGate(max_workers)
        self._tasks: Dict[str, asyncio.Task] = {}
        self._run_id = f"run_{int(time.time() * 1000)}"
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_thread: Optional[int] = None
        self._reported: Dict[str, ProgressSnapshot] = {}

    @property
    def gate(self) -> BoundedGate:
        return self._gate

    async def run(self) -> RunReport:
        """
        Execute every suite and return the report.

        Raises:
            ValidationError: The suite set is invalid; nothing ran
            SuiteExecutionError: A suite failed with continue_on_error off;
                carries the partial report and the suites that never ran
        """
        if self.state != SchedulerState.IDLE:
            raise SchedulerStateError(f"Scheduling loop already used (state: {self.state.value})")

        self._loop = asyncio.get_running_loop()
        self._loop_thread = threading.get_ident()

        self._transition(SchedulerState.VALIDATING)
        try:
            self.graph = DependencyGraph.build(self.suites)
        except ValidationError as e:
            logger.error(f"Suite validation failed: {e}")
            self._transition(SchedulerState.ABORTED)
            raise

        report = RunReport(name=self.report_name)
        if self.environment_provider is not None:
            report.environment = dict(await call_maybe_async(self.environment_provider))

        logger.info(f"Starting run {self._run_id}: {len(self.suites)} suites, "
                    f"max_workers={self.max_workers}, continue_on_error={self.continue_on_error}")

        fatal: Optional[_SuiteOutcome] = None
        try:
            while True:
                if fatal is None:
                    self._transition(SchedulerState.DISPATCHING)
                    self._dispatch_ready()

                if not self._tasks:
                    if fatal is None and self.execution.pending:
                        # unreachable for an acyclic graph
                        raise SchedulerStateError(
                            "No runnable suites but pending suites remain",
                            {"pending": sorted(self.execution.pending)},
                        )
                    break

                if fatal is not None or not self.execution.pending:
                    self._transition(SchedulerState.DRAINING)
                else:
                    self._transition(SchedulerState.AWAITING_COMPLETION)

                done, _ = await asyncio.wait(
                    list(self._tasks.values()), return_when=asyncio.FIRST_COMPLETED
                )

                # Handle simultaneous completions in registration order
                for suite in self.suites:
                    task = self._tasks.get(suite.name)
                    if task is None or task not in done:
                        continue
                    outcome = task.result()
                    self._complete(outcome, report)
                    if outcome.failed and not self.continue_on_error and fatal is None:
                        fatal = outcome
                        logger.error(f"Suite {outcome.name} failed, no further suites will be dispatched "
                                     f"({len(self._tasks)} still running)")
        except BaseException:
            # Hook or internal failure: do not leave orphaned suite tasks behind
            await cancel_tasks(list(self._tasks.values()))
            self._tasks.clear()
            self._transition(SchedulerState.ABORTED)
            raise

        report.generated_at = datetime.now(timezone.utc).isoformat()

        if fatal is not None:
            never_ran = [s.name for s in self.suites if s.name in self.execution.pending]
            report.skipped = never_ran
            self._transition(SchedulerState.ABORTED)
            logger.error(f"Run {self._run_id} aborted by suite {fatal.name}; "
                         f"{len(report.suites)} completed, {len(never_ran)} never ran")
            raise SuiteExecutionError(
                f'Suite "{fatal.name}" failed: {fatal.failure_message}',
                suite_name=fatal.name,
                cause=fatal.error,
                partial_report=report,
                never_ran=never_ran,
            ) from fatal.error

        self._transition(SchedulerState.DONE)
        failed = report.failed_suites
        if failed:
            logger.warning(f"Run {self._run_id} finished with {len(failed)} failed suites: {', '.join(failed)}")
        logger.info(f"Run {self._run_id} completed: {len(report.suites)} suites")
        return report

    def _transition(self, new_state: SchedulerState) -> None:
        if new_state != self.state:
            logger.debug(f"Scheduler state {self.state.value} -> {new_state.value}")
            self.state = new_state

    def _dispatch_ready(self) -> None:
        """Launch every ready suite a permit can be found for."""
        for suite in self.graph.ready_suites(self.execution.completed):
            if suite.name in self.execution.running:
                continue
            if not self._gate.try_acquire():
                break
            self._launch(suite)

    def _launch(self, suite: SuiteConfig) -> None:
        execution = self.execution
        execution.pending.discard(suite.name)
        execution.running.add(suite.name)
        execution.start_times[suite.name] = time.time()
        execution.max_observed_running = max(execution.max_observed_running, len(execution.running))

        logger.info(f"Dispatching suite {suite.name} ({len(execution.running)}/{self.max_workers} running)")

        if self.hooks.on_suite_start:
            self.hooks.on_suite_start(suite.name)

        self._push_progress(suite.name, ProgressSnapshot(
            suite=suite.name, task="", current=0, total=0,
            percentage=0.0, phase=BenchmarkPhase.RUNNING,
        ))

        self._tasks[suite.name] = create_task_with_name(
            self._execute_suite(suite), name=f"suite:{suite.name}"
        )

    async def _execute_suite(self, suite: SuiteConfig) -> _SuiteOutcome:
        """Run one suite's benchmark; failures become part of the outcome."""
        suite_logger = get_suite_logger(suite.name, self._run_id)
        start_time = self.execution.start_times[suite.name]
        benchmark = suite.benchmark

        set_callback = getattr(benchmark, "set_progress_callback", None)
        if callable(set_callback):
            set_callback(self._make_progress_reporter(suite.name))

        try:
            # a timed-out thread keeps its permit until it has actually finished
            raw = await call_with_deadline(benchmark.run, self.timeout, suite.name)
            results = _coerce_results(raw)
        except Exception as e:
            end_time = time.time()
            suite_logger.error(f"Suite {suite.name} raised {type(e).__name__}: {e}")
            return _SuiteOutcome(
                name=suite.name, results=[], start_time=start_time,
                end_time=end_time, error=e, failure_message=str(e) or type(e).__name__,
            )

        end_time = time.time()
        failed = [r for r in results if r.is_failed]
        if failed:
            message = "; ".join(f"{r.name}: {r.error or 'failed'}" for r in failed)
            suite_logger.error(f"Suite {suite.name} reported failed tasks: {message}")
            return _SuiteOutcome(
                name=suite.name, results=results, start_time=start_time,
                end_time=end_time, failure_message=message,
            )

        print_results = getattr(benchmark, "print_results", None)
        if callable(print_results):
            print_results()

        suite_logger.info(f"Suite {suite.name} finished in {end_time - start_time:.3f}s "
                          f"({len(results)} tasks)")
        return _SuiteOutcome(name=suite.name, results=results,
                             start_time=start_time, end_time=end_time)

    def _complete(self, outcome: _SuiteOutcome, report: RunReport) -> None:
        """Apply a completion: permit, state sets, report, progress, hook."""
        self._tasks.pop(outcome.name, None)
        self._gate.release()

        execution = self.execution
        execution.running.discard(outcome.name)
        execution.completed.add(outcome.name)
        execution.end_times[outcome.name] = outcome.end_time

        report.suites.append(SuiteReport(
            name=outcome.name,
            results=outcome.results,
            duration=outcome.end_time - outcome.start_time,
            timestamp=outcome.end_time,
            start_time=outcome.start_time,
            end_time=outcome.end_time,
            status=SuiteStatus.FAILED if outcome.failed else SuiteStatus.SUCCESS,
            error=outcome.failure_message,
        ))

        last = self._reported.get(outcome.name)
        total = max(len(outcome.results), last.total if last else 0)
        self._push_progress(outcome.name, ProgressSnapshot(
            suite=outcome.name,
            task=outcome.results[-1].name if outcome.results else (last.task if last else ""),
            current=total,
            total=total,
            percentage=100.0,
            phase=BenchmarkPhase.COMPLETE,
        ))

        if outcome.failed and self.continue_on_error:
            logger.warning(f"Suite {outcome.name} failed, continuing: {outcome.failure_message}")

        if self.hooks.on_suite_complete:
            self.hooks.on_suite_complete(outcome.name, outcome.results)

    def _push_progress(self, suite_name: str, snapshot: ProgressSnapshot) -> None:
        self._reported[suite_name] = snapshot
        self.progress.update(suite_name, snapshot)

    def _make_progress_reporter(self, suite_name: str) -> Callable[[ProgressSnapshot], None]:
        """Callback handed to a benchmark; always applies updates on the loop."""

        def apply(snapshot: ProgressSnapshot) -> None:
            # late updates must not overwrite the final snapshot
            if suite_name in self.execution.completed:
                return
            self._push_progress(suite_name, snapshot)

        def report(snapshot: ProgressSnapshot) -> None:
            if threading.get_ident() == self._loop_thread:
                apply(snapshot)
            else:
                self._loop.call_soon_threadsafe(apply, snapshot)

        return report


def _coerce_results(raw: Any) -> List[BenchmarkResult]:
    """Normalise whatever a benchmark returned into a list of results."""
    if raw is None:
        return []
    if isinstance(raw, (BenchmarkResult, dict)):
        raw = [raw]

    results = []
    for item in raw:
        if isinstance(item, BenchmarkResult):
            results.append(item)
        elif isinstance(item, dict):
            results.append(BenchmarkResult(**item))
        else:
            raise TypeError(f"Unsupported benchmark result type: {type(item).__name__}")
    return results
