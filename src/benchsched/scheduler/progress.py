"""
Progress Aggregator

Fan-in of per-suite progress snapshots into a single aggregate stream.
"""

from typing import Dict, Optional

from .types import AggregateProgress, BenchmarkPhase, ProgressCallback, ProgressSnapshot


class ProgressAggregator:
    """Keeps the latest snapshot per suite and emits their sum on every update."""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self._callback = callback
        self._suite_progress: Dict[str, ProgressSnapshot] = {}
        self._last_suite = ""
        self._last_task = ""
        self._last_phase = BenchmarkPhase.RUNNING

    def update(self, suite_name: str, snapshot: ProgressSnapshot) -> AggregateProgress:
        """
        Record a suite's snapshot and emit the new aggregate.

        The callback is invoked exactly once per call.
        """
        self._suite_progress[suite_name] = snapshot
        self._last_suite = suite_name
        self._last_task = snapshot.task
        self._last_phase = snapshot.phase

        aggregate = self.aggregate()
        if self._callback is not None:
            self._callback(aggregate)
        return aggregate

    def aggregate(self) -> AggregateProgress:
        """Sum current/total over every suite that has reported."""
        current = sum(p.current for p in self._suite_progress.values())
        total = sum(p.total for p in self._suite_progress.values())
        percentage = (current / total) * 100.0 if total > 0 else 0.0

        return AggregateProgress(
            suite=self._last_suite,
            task=self._last_task,
            current=current,
            total=total,
            percentage=percentage,
            phase=self._last_phase,
        )

    def remove(self, suite_name: str) -> None:
        self._suite_progress.pop(suite_name, None)

    def reset(self) -> None:
        self._suite_progress.clear()
        self._last_suite = ""
        self._last_task = ""
        self._last_phase = BenchmarkPhase.RUNNING

    def get_all_progress(self) -> Dict[str, ProgressSnapshot]:
        return dict(self._suite_progress)
