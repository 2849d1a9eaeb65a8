"""
Parallel Benchmark Runner

Public registration and execution API. Suites are registered here and each
call to ``run_all`` drives a fresh SchedulingLoop over them.
"""

import asyncio
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.config import AppConfig, ParallelConfig
from ..core.exceptions import DuplicateSuiteError
from ..utils.logging import get_logger
from .environment import EnvironmentCollector
from .loop import (
    EnvironmentProvider,
    ExecutionState,
    SchedulerHooks,
    SchedulingLoop,
    SuiteCompleteHook,
    SuiteStartHook,
)
from .progress import ProgressAggregator
from .reporting import export_json, print_summary
from .types import ProgressCallback, RunReport, SuiteConfig

logger = get_logger(__name__)


@dataclass
class RunnerOptions:
    """Configuration surface accepted by ParallelBenchmarkRunner."""
    parallel: ParallelConfig = field(default_factory=ParallelConfig)
    continue_on_error: bool = False
    on_progress: Optional[ProgressCallback] = None
    on_suite_start: Optional[SuiteStartHook] = None
    on_suite_complete: Optional[SuiteCompleteHook] = None
    timeout: Optional[float] = None
    report_name: str = "Benchmark Report"
    environment_provider: Optional[EnvironmentProvider] = None

    @classmethod
    def from_config(cls, config: AppConfig, **overrides) -> "RunnerOptions":
        """Build options from the application configuration."""
        collector = EnvironmentCollector(include_git=config.reporting.include_git)
        options = cls(
            parallel=ParallelConfig(
                enabled=config.scheduler.parallel.enabled,
                max_workers=config.scheduler.parallel.max_workers,
            ),
            continue_on_error=config.scheduler.continue_on_error,
            timeout=config.scheduler.suite_timeout,
            report_name=config.reporting.report_name,
            environment_provider=collector.collect if config.reporting.include_environment else dict,
        )
        return replace(options, **overrides)


class ParallelBenchmarkRunner:
    """Registers suites and runs them with dependency ordering and bounded parallelism."""

    def __init__(self, options: Optional[RunnerOptions] = None):
        self.options = options or RunnerOptions()
        self.options.parallel.validate()

        self._suites: Dict[str, SuiteConfig] = {}
        self._progress = ProgressAggregator(self.options.on_progress)
        self._last_loop: Optional[SchedulingLoop] = None

    def add_suite(self, config: SuiteConfig) -> "ParallelBenchmarkRunner":
        """Register a suite; names must be unique."""
        if config.name in self._suites:
            raise DuplicateSuiteError(config.name)
        self._suites[config.name] = config
        logger.debug(f"Registered suite {config.name} (depends on: {config.depends_on or 'nothing'})")
        return self

    def add_simple_suite(self, name: str, benchmark: Any) -> "ParallelBenchmarkRunner":
        """Register a suite without dependencies."""
        return self.add_suite(SuiteConfig(name=name, benchmark=benchmark))

    def remove_suite(self, name: str) -> bool:
        removed = self._suites.pop(name, None) is not None
        if removed:
            logger.debug(f"Removed suite {name}")
        return removed

    def clear(self) -> None:
        self._suites.clear()

    def get_suites(self) -> List[str]:
        """Registered suite names in registration order."""
        return list(self._suites.keys())

    def get_max_workers(self) -> int:
        return self.options.parallel.effective_max_workers()

    def get_state(self) -> ExecutionState:
        """Copy of the most recent run's execution state."""
        if self._last_loop is None:
            return ExecutionState(pending=set(self._suites))
        return self._last_loop.execution.copy()

    def get_progress_aggregator(self) -> ProgressAggregator:
        return self._progress

    async def run_all(self) -> RunReport:
        """
        Run every registered suite from scratch.

        Returns:
            The complete RunReport

        Raises:
            ValidationError: Unknown dependency or cycle; nothing ran
            SuiteExecutionError: A suite failed and continue_on_error is off;
                ``partial_report`` holds what completed
        """
        self._progress.reset()
        loop = SchedulingLoop(
            suites=list(self._suites.values()),
            max_workers=self.get_max_workers(),
            continue_on_error=self.options.continue_on_error,
            progress=self._progress,
            hooks=SchedulerHooks(
                on_suite_start=self.options.on_suite_start,
                on_suite_complete=self.options.on_suite_complete,
            ),
            timeout=self.options.timeout,
            report_name=self.options.report_name,
            environment_provider=self.options.environment_provider or EnvironmentCollector().collect,
        )
        self._last_loop = loop
        return await loop.run()

    def run_all_sync(self) -> RunReport:
        """Blocking wrapper around ``run_all`` for callers without an event loop."""
        return asyncio.run(self.run_all())

    def print_summary(self, report: RunReport) -> None:
        print_summary(report, max_workers=self.get_max_workers())

    def export_json(self, report: RunReport, filepath: Union[str, Path]) -> Path:
        return export_json(report, filepath)


def create_parallel_runner(options: Optional[RunnerOptions] = None) -> ParallelBenchmarkRunner:
    """Create a ParallelBenchmarkRunner."""
    return ParallelBenchmarkRunner(options)
