"""
Pytest Configuration

Global test configuration, fixtures, and benchmark doubles for the
suite scheduler test suite.
"""

import asyncio
import sys
import tempfile
import textwrap
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest
import yaml

# Add src to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from benchsched.core.config import ParallelConfig
from benchsched.scheduler.runner import ParallelBenchmarkRunner, RunnerOptions
from benchsched.scheduler.types import BenchmarkResult, BenchmarkStatus, SuiteConfig


def make_result(name: str = "task", status: Optional[BenchmarkStatus] = None,
                avg_time: float = 1.0, ops_per_second: float = 1000.0,
                rme: float = 0.5, error: Optional[str] = None) -> BenchmarkResult:
    """Build a BenchmarkResult with sensible defaults."""
    return BenchmarkResult(
        name=name,
        ops_per_second=ops_per_second,
        avg_time=avg_time,
        iterations=10,
        total_time=avg_time * 10,
        rme=rme,
        status=status,
        error=error,
    )


class EventLog:
    """Ordered record of scheduler hook calls and benchmark activity."""

    def __init__(self):
        self.events: List[Tuple[str, str]] = []
        self.running = 0
        self.max_running = 0
        self.times: Dict[str, Dict[str, float]] = {}

    def on_suite_start(self, name: str) -> None:
        self.events.append(("start", name))
        self.running += 1
        self.max_running = max(self.max_running, self.running)

    def on_suite_complete(self, name: str, results) -> None:
        self.events.append(("complete", name))
        self.running -= 1

    def mark(self, name: str, key: str) -> None:
        self.times.setdefault(name, {})[key] = time.monotonic()

    def index(self, kind: str, name: str) -> int:
        return self.events.index((kind, name))

    def started(self) -> List[str]:
        return [name for kind, name in self.events if kind == "start"]


class AsyncBenchmark:
    """Coroutine benchmark that sleeps, then returns or raises."""

    def __init__(self, name: str, log: Optional[EventLog] = None, delay: float = 0.01,
                 fail: bool = False, results: Optional[List[BenchmarkResult]] = None):
        self.name = name
        self.log = log
        self.delay = delay
        self.fail = fail
        self.results = results
        self.calls = 0

    async def run(self) -> List[BenchmarkResult]:
        self.calls += 1
        if self.log:
            self.log.mark(self.name, "begin")
        await asyncio.sleep(self.delay)
        if self.log:
            self.log.mark(self.name, "end")
        if self.fail:
            raise RuntimeError(f"{self.name} exploded")
        if self.results is not None:
            return self.results
        return [make_result(f"{self.name}-task")]


class SyncBenchmark:
    """Blocking benchmark; the scheduler must run it off the event loop."""

    def __init__(self, name: str, delay: float = 0.01):
        self.name = name
        self.delay = delay
        self.thread_ids: List[int] = []

    def run(self) -> List[BenchmarkResult]:
        self.thread_ids.append(threading.get_ident())
        time.sleep(self.delay)
        return [make_result(f"{self.name}-sync")]


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def event_log():
    """Fresh hook/timing recorder."""
    return EventLog()


@pytest.fixture
def make_runner(event_log):
    """Factory for runners wired to the event log, with a fixed environment."""

    def _make(max_workers: Optional[int] = None, parallel: bool = True,
              continue_on_error: bool = False, **kwargs) -> ParallelBenchmarkRunner:
        options = RunnerOptions(
            parallel=ParallelConfig(enabled=parallel, max_workers=max_workers),
            continue_on_error=continue_on_error,
            on_suite_start=event_log.on_suite_start,
            on_suite_complete=event_log.on_suite_complete,
            environment_provider=lambda: {"platform": "test", "arch": "x64", "runtime_version": "3.x"},
            **kwargs,
        )
        return ParallelBenchmarkRunner(options)

    return _make


@pytest.fixture
def chain_suites(event_log):
    """A -> B -> C where C depends on B and B depends on A."""
    return [
        SuiteConfig(name="A", benchmark=AsyncBenchmark("A", event_log, delay=0.02)),
        SuiteConfig(name="B", benchmark=AsyncBenchmark("B", event_log, delay=0.01), depends_on=["A"]),
        SuiteConfig(name="C", benchmark=AsyncBenchmark("C", event_log, delay=0.01), depends_on=["B"]),
    ]


SUITES_MODULE = "benchsched_cli_suites"

SUITES_SOURCE = textwrap.dedent('''
    from benchsched import BenchmarkResult


    def _result(name, avg):
        return BenchmarkResult(name=name, ops_per_second=1000.0 / avg, avg_time=avg,
                               iterations=10, total_time=avg * 10)


    def fast():
        return [_result("op", 0.5)]


    def slow():
        return [_result("op", 50.0)]


    async def async_suite():
        return [_result("async-op", 1.0)]


    def broken():
        raise RuntimeError("suite blew up")


    class ClassSuite:
        def run(self):
            return [_result("class-op", 1.0)]


    not_callable = 42
''')


@pytest.fixture
def suites_module(temp_dir, monkeypatch):
    """Importable module of sample suite callables."""
    (temp_dir / f"{SUITES_MODULE}.py").write_text(SUITES_SOURCE)
    monkeypatch.syspath_prepend(str(temp_dir))
    return SUITES_MODULE


@pytest.fixture
def write_plan(temp_dir, suites_module):
    """Write a plan file; suite benchmarks may be given as bare attribute names."""

    def _write(suites, name="plan.yaml", **extra):
        entries = []
        for entry in suites:
            entry = dict(entry)
            if ":" not in entry.get("benchmark", ":"):
                entry["benchmark"] = f"{suites_module}:{entry['benchmark']}"
            entries.append(entry)
        path = temp_dir / name
        path.write_text(yaml.dump({"suites": entries, **extra}))
        return path

    return _write
