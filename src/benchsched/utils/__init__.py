"""
Utils Module

Logging configuration and async utility functions.
"""

from .logging import setup_logging, get_logger, get_suite_logger
from .async_helpers import call_maybe_async, with_timeout, create_task_with_name, cancel_tasks

__all__ = [
    "setup_logging",
    "get_logger",
    "get_suite_logger",
    "call_maybe_async",
    "with_timeout",
    "create_task_with_name",
    "cancel_tasks",
]
