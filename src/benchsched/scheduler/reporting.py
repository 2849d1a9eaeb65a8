"""
Run Report Output

Terminal summary and JSON export of a RunReport.
"""

import json
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..utils.logging import get_logger
from .types import RunReport

logger = get_logger(__name__)


def build_summary_table(report: RunReport) -> Table:
    """One row per suite in completion order."""
    table = Table(title=report.name, show_header=True, header_style="bold blue")
    table.add_column("Suite", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Tasks", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Error", style="dim")

    for suite in report.suites:
        status = "[green]success[/green]" if suite.success else "[red]failed[/red]"
        table.add_row(
            suite.name,
            status,
            str(len(suite.results)),
            f"{suite.duration * 1000:.1f}ms",
            suite.error or "",
        )

    for name in report.skipped:
        table.add_row(name, "[yellow]not run[/yellow]", "-", "-", "")

    return table


def print_summary(report: RunReport, max_workers: Optional[int] = None,
                  console: Optional[Console] = None) -> None:
    """Print environment info and the suite table."""
    console = console or Console()
    env = report.environment

    env_lines = []
    if env:
        env_lines.append(f"Platform: {env.get('platform', 'N/A')} {env.get('arch', '')}".rstrip())
        env_lines.append(f"Python: {env.get('runtime_version', 'N/A')}")
        if env.get('git_commit'):
            env_lines.append(f"Git: {env.get('git_branch', '?')}@{env['git_commit']}")
    if max_workers is not None:
        env_lines.append(f"Max workers: {max_workers}")
    env_lines.append(f"Generated: {report.generated_at or 'N/A'}")

    console.print(Panel("\n".join(env_lines), title="Environment", border_style="blue"))
    console.print(build_summary_table(report))
    console.print(
        f"Suites: {len(report.suites)}  Tasks: {report.total_tasks}  "
        f"Total time: {report.total_duration * 1000:.1f}ms"
    )


def export_json(report: RunReport, filepath: Union[str, Path]) -> Path:
    """Write the report as JSON and return the path written."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, indent=2, default=str)
    logger.info(f"Report exported to {path}")
    return path
