#!/usr/bin/env python3
"""
Sample Benchmark Script

This script demonstrates how to use the suite scheduler programmatically:
registering suites with dependencies, running them in parallel and
printing the summary.
"""

import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from benchsched import (
    FunctionBenchmark,
    ParallelBenchmarkRunner,
    ParallelConfig,
    RunnerOptions,
    SuiteConfig,
)
from examples.sample_suites import dict_ops, list_ops, string_ops


async def main():
    """Run three suites where strings waits on both lists and dicts."""
    print("🚀 Running sample suites...")

    options = RunnerOptions(
        parallel=ParallelConfig(enabled=True, max_workers=2),
        continue_on_error=True,
        on_suite_start=lambda name: print(f"  ▶ {name}"),
        on_suite_complete=lambda name, results: print(f"  ✓ {name} ({len(results)} tasks)"),
    )
    runner = ParallelBenchmarkRunner(options)
    runner.add_simple_suite("lists", FunctionBenchmark(list_ops))
    runner.add_simple_suite("dicts", FunctionBenchmark(dict_ops))
    runner.add_suite(SuiteConfig(
        name="strings",
        benchmark=FunctionBenchmark(string_ops),
        depends_on=["lists", "dicts"],
    ))

    report = await runner.run_all()
    runner.print_summary(report)


if __name__ == "__main__":
    asyncio.run(main())
