"""
Threshold Checks

Compares task results in a RunReport against per-task performance limits.
Keys are either ``"suite::task"`` or a bare ``"task"``; the suite-qualified
key wins when both are present.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .types import RunReport


@dataclass
class Threshold:
    """Performance limits for one task."""
    max_avg_time: Optional[float] = None
    min_ops_per_second: Optional[float] = None
    max_rme: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Threshold":
        return cls(
            max_avg_time=data.get('max_avg_time'),
            min_ops_per_second=data.get('min_ops_per_second'),
            max_rme=data.get('max_rme'),
        )


@dataclass
class ThresholdFailure:
    suite: str
    task: str
    reasons: List[str]


@dataclass
class ThresholdCheckResult:
    passed: bool
    failures: List[ThresholdFailure] = field(default_factory=list)


def check_thresholds(report: RunReport, thresholds: Dict[str, Any]) -> ThresholdCheckResult:
    """
    Check every result in the report against the matching threshold.

    Args:
        report: Completed run report
        thresholds: Mapping of key -> Threshold (or a dict of its fields)

    Returns:
        ThresholdCheckResult listing every violating task
    """
    failures: List[ThresholdFailure] = []

    for suite in report.suites:
        for result in suite.results:
            threshold = thresholds.get(f"{suite.name}::{result.name}")
            if threshold is None:
                threshold = thresholds.get(result.name)
            if threshold is None:
                continue
            if isinstance(threshold, Mapping):
                threshold = Threshold.from_dict(threshold)

            reasons = []
            if threshold.max_avg_time is not None and result.avg_time > threshold.max_avg_time:
                reasons.append(
                    f"avg_time {result.avg_time:.4f}ms > max_avg_time {threshold.max_avg_time}ms"
                )
            if threshold.min_ops_per_second is not None and result.ops_per_second < threshold.min_ops_per_second:
                reasons.append(
                    f"ops_per_second {result.ops_per_second:.2f} < min_ops_per_second "
                    f"{threshold.min_ops_per_second}"
                )
            if threshold.max_rme is not None and result.rme > threshold.max_rme:
                reasons.append(f"rme {result.rme:.2f}% > max_rme {threshold.max_rme}%")

            if reasons:
                failures.append(ThresholdFailure(suite=suite.name, task=result.name, reasons=reasons))

    return ThresholdCheckResult(passed=not failures, failures=failures)
