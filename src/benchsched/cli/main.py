"""
CLI Entry Point

Command-line interface for running suite plans using the Click framework
with rich output formatting.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn

from ..core.config import ParallelConfig, get_config, reload_config
from ..core.exceptions import BenchSchedException, SuiteExecutionError, ValidationError
from ..scheduler.graph import DependencyGraph
from ..scheduler.reporting import export_json, print_summary
from ..scheduler.runner import ParallelBenchmarkRunner, RunnerOptions
from ..scheduler.thresholds import check_thresholds
from ..utils.logging import get_logger, setup_logging
from .plan import load_plan

console = Console()
logger = get_logger(__name__)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """benchsched - dependency-aware parallel benchmark suite runner"""
    ctx.ensure_object(dict)

    try:
        if config:
            app_config = reload_config(Path(config))
        else:
            app_config = get_config()

        if verbose:
            app_config.logging.level = 'DEBUG'
            app_config.logging.console_level = 'INFO'
        setup_logging(app_config)
    except BenchSchedException as e:
        console.print(f"[red]Error initializing application: {e}[/red]")
        sys.exit(1)

    ctx.obj['config'] = app_config


@cli.command()
@click.argument('plan_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--parallel/--sequential', default=None, help='Override parallel execution')
@click.option('--max-workers', '-j', type=click.IntRange(min=1), help='Maximum concurrently running suites')
@click.option('--continue-on-error/--fail-fast', default=None, help='Keep running after a suite fails')
@click.option('--timeout', type=float, help='Per-suite timeout in seconds')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path), help='Write the report as JSON')
@click.option('--quiet', '-q', is_flag=True, help='Do not print the summary table')
@click.pass_context
def run(ctx, plan_path, parallel, max_workers, continue_on_error, timeout, output, quiet):
    """Run every suite in PLAN_PATH.

    \b
    EXAMPLES:

    benchsched run plan.yaml

    benchsched run plan.yaml --parallel -j 4 --continue-on-error

    benchsched run plan.yaml -o reports/nightly.json
    """
    app_config = ctx.obj['config']

    try:
        plan = load_plan(plan_path)
    except BenchSchedException as e:
        console.print(f"[red]Invalid plan: {e}[/red]")
        sys.exit(2)

    options = RunnerOptions.from_config(app_config, report_name=plan.name)
    if plan.parallel is not None:
        options.parallel = plan.parallel
    if plan.continue_on_error is not None:
        options.continue_on_error = plan.continue_on_error
    if plan.timeout is not None:
        options.timeout = plan.timeout

    # Command-line flags win over the plan and config file
    if parallel is not None or max_workers is not None:
        options.parallel = ParallelConfig(
            enabled=parallel if parallel is not None else True,
            max_workers=max_workers if max_workers is not None else options.parallel.max_workers,
        )
    if continue_on_error is not None:
        options.continue_on_error = continue_on_error
    if timeout is not None:
        options.timeout = timeout

    exit_code = 0
    report = None
    abort_error = None

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console,
        transient=True,
        disable=quiet,
    ) as progress:
        task_id = progress.add_task("Running suites", total=len(plan.suites))
        options.on_suite_start = lambda name: progress.update(task_id, description=f"Running {name}")
        options.on_suite_complete = lambda name, results: progress.advance(task_id)

        runner = ParallelBenchmarkRunner(options)
        try:
            for suite in plan.suites:
                runner.add_suite(suite)
            report = asyncio.run(runner.run_all())
        except ValidationError as e:
            console.print(f"[red]Plan validation failed: {e}[/red]")
            sys.exit(2)
        except SuiteExecutionError as e:
            logger.error(f"Run aborted: {e}")
            abort_error = e
            report = e.partial_report
            exit_code = 1

    if abort_error is not None:
        console.print(f"[red]Run aborted: {abort_error.message}[/red]")
        if abort_error.never_ran:
            console.print(f"[yellow]Never ran: {', '.join(abort_error.never_ran)}[/yellow]")
    elif report.failed_suites:
        exit_code = 1

    if not quiet:
        print_summary(report, max_workers=runner.get_max_workers(), console=console)

    if output:
        export_json(report, output)
        console.print(f"[green]Report written to {output}[/green]")

    if plan.thresholds:
        result = check_thresholds(report, plan.thresholds)
        for failure in result.failures:
            console.print(f"[red]Threshold violated: {failure.suite}::{failure.task} - "
                          f"{'; '.join(failure.reasons)}[/red]")
        if not result.passed:
            exit_code = exit_code or 3

    sys.exit(exit_code)


@cli.command()
@click.argument('plan_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(plan_path):
    """Check PLAN_PATH for unknown dependencies and cycles without running it."""
    try:
        plan = load_plan(plan_path)
        graph = DependencyGraph.build(plan.suites)
    except BenchSchedException as e:
        console.print(f"[red]Invalid plan: {e}[/red]")
        sys.exit(2)

    console.print(f"[green]Plan {plan.name!r} is valid ({len(graph)} suites)[/green]")
    console.print("Execution order: " + " -> ".join(graph.topological_order))


def main(argv: Optional[list] = None):
    """Main entry point with top-level error handling."""
    try:
        cli(args=argv)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
