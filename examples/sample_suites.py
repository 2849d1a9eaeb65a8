"""
Sample Suites

Small benchmark callables referenced by examples/plan.yaml. Timing here is
deliberately naive; real suites delegate to a proper timing engine.
"""

import time
from typing import Callable, List

from benchsched import BenchmarkResult


def _time_task(name: str, func: Callable[[], object], iterations: int = 200) -> BenchmarkResult:
    start = time.perf_counter()
    for _ in range(iterations):
        func()
    total_ms = (time.perf_counter() - start) * 1000
    avg_ms = total_ms / iterations
    return BenchmarkResult(
        name=name,
        ops_per_second=1000.0 / avg_ms if avg_ms else 0.0,
        avg_time=avg_ms,
        iterations=iterations,
        total_time=total_ms,
    )


def list_ops() -> List[BenchmarkResult]:
    return [
        _time_task("append", lambda: [i for i in range(1000)]),
        _time_task("extend", lambda: list(range(1000))),
    ]


def dict_ops() -> List[BenchmarkResult]:
    return [
        _time_task("comprehension", lambda: {i: i for i in range(1000)}),
        _time_task("fromkeys", lambda: dict.fromkeys(range(1000))),
    ]


def string_ops() -> List[BenchmarkResult]:
    return [
        _time_task("join", lambda: ",".join(str(i) for i in range(500))),
        _time_task("format", lambda: [f"{i:05d}" for i in range(500)]),
    ]
