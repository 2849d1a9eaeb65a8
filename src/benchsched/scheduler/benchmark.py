"""
Benchmark Adapters

Wraps plain callables so they satisfy the Benchmark protocol.
"""

from typing import Any, Callable, List, Optional

from ..utils.async_helpers import call_maybe_async
from .types import BenchmarkResult


class FunctionBenchmark:
    """Benchmark whose ``run`` delegates to a sync or async callable."""

    def __init__(self, func: Callable[[], Any], name: Optional[str] = None):
        self.func = func
        self.name = name or getattr(func, "__name__", "benchmark")
        self.results: List[BenchmarkResult] = []

    async def run(self) -> Any:
        self.results = await call_maybe_async(self.func)
        return self.results

    def __repr__(self) -> str:
        return f"FunctionBenchmark({self.name!r})"
