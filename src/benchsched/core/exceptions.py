"""
Custom Exception Classes

Application-specific exception classes for suite registration, validation
and execution failures raised by the scheduler.
"""

from typing import Optional, Any, Dict, List


class BenchSchedException(Exception):
    """Base exception class for all benchsched errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(BenchSchedException):
    """Raised when there's an issue with configuration setup or validation."""
    pass


class ValidationError(BenchSchedException):
    """Raised when a suite set fails validation before any suite runs."""
    pass


class DuplicateSuiteError(ValidationError):
    """Raised when a suite name is registered twice."""

    def __init__(self, name: str, **kwargs):
        super().__init__(f'Suite "{name}" is already registered', kwargs)
        self.name = name


class UnknownDependencyError(ValidationError):
    """Raised when a suite depends on a suite that was never registered."""

    def __init__(self, suite: str, missing: str, **kwargs):
        super().__init__(
            f'Suite "{suite}" depends on unknown suite "{missing}"', kwargs
        )
        self.suite = suite
        self.missing = missing


class CyclicDependencyError(ValidationError):
    """Raised when the dependency graph contains a cycle."""

    def __init__(self, cycle_members: List[str], **kwargs):
        super().__init__(
            f"Cyclic dependency detected between suites: {', '.join(cycle_members)}",
            kwargs,
        )
        self.cycle_members = list(cycle_members)


class SchedulerStateError(BenchSchedException):
    """Raised when the scheduler or its permit gate is used incorrectly."""
    pass


class SuiteExecutionError(BenchSchedException):
    """Raised when a suite fails and the run is not allowed to continue."""

    def __init__(self, message: str, suite_name: str,
                 cause: Optional[BaseException] = None,
                 partial_report: Optional[Any] = None,
                 never_ran: Optional[List[str]] = None, **kwargs):
        super().__init__(message, kwargs)
        self.suite_name = suite_name
        self.cause = cause
        self.partial_report = partial_report
        self.never_ran = list(never_ran or [])


class SuiteTimeoutError(SuiteExecutionError):
    """Raised when a suite exceeds its configured timeout."""

    def __init__(self, suite_name: str, timeout: float, **kwargs):
        super().__init__(
            f'Suite "{suite_name}" timed out after {timeout}s',
            suite_name=suite_name,
            **kwargs,
        )
        self.timeout = timeout
