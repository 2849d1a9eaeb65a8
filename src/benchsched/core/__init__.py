"""
Core Module

Foundational components used across the application including configuration
management and custom exceptions.
"""

from .config import get_config, set_config, reload_config, AppConfig, ParallelConfig
from .exceptions import (
    BenchSchedException,
    ConfigurationError,
    ValidationError,
    DuplicateSuiteError,
    UnknownDependencyError,
    CyclicDependencyError,
    SchedulerStateError,
    SuiteExecutionError,
    SuiteTimeoutError,
)

__all__ = [
    "get_config",
    "set_config",
    "reload_config",
    "AppConfig",
    "ParallelConfig",
    "BenchSchedException",
    "ConfigurationError",
    "ValidationError",
    "DuplicateSuiteError",
    "UnknownDependencyError",
    "CyclicDependencyError",
    "SchedulerStateError",
    "SuiteExecutionError",
    "SuiteTimeoutError",
]
