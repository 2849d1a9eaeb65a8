"""
Dependency Graph Resolver

Validates a suite set (no missing references, no cycles) and answers
topological-order and ready-set queries for the scheduling loop.
"""

from collections import deque
from typing import Dict, Iterable, List, Set

from ..core.exceptions import CyclicDependencyError, UnknownDependencyError
from ..utils.logging import get_logger
from .types import SuiteConfig

logger = get_logger(__name__)


class DependencyGraph:
    """Read-only dependency view built once per run."""

    def __init__(self, suites: List[SuiteConfig], dependencies: Dict[str, List[str]],
                 dependents: Dict[str, List[str]], order: List[str]):
        self._suites = list(suites)
        self._dependencies = dependencies
        self._dependents = dependents
        self._order = order

    @classmethod
    def build(cls, suites: Iterable[SuiteConfig]) -> "DependencyGraph":
        """
        Build and validate the graph with Kahn's algorithm.

        Args:
            suites: Suite configs in registration order

        Returns:
            A validated DependencyGraph

        Raises:
            UnknownDependencyError: A depends_on entry names no registered suite
            CyclicDependencyError: No topological order exists
        """
        suites = list(suites)
        names = {suite.name for suite in suites}

        dependencies: Dict[str, List[str]] = {}
        dependents: Dict[str, List[str]] = {suite.name: [] for suite in suites}
        in_degree: Dict[str, int] = {}

        for suite in suites:
            for dep in suite.depends_on:
                if dep not in names:
                    raise UnknownDependencyError(suite.name, dep)
                dependents[dep].append(suite.name)
            dependencies[suite.name] = list(suite.depends_on)
            in_degree[suite.name] = len(suite.depends_on)

        # Seeding in registration order keeps the output deterministic
        queue = deque(suite.name for suite in suites if in_degree[suite.name] == 0)
        order: List[str] = []

        while queue:
            current = queue.popleft()
            order.append(current)
            for dependent in dependents[current]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        if len(order) != len(suites):
            remaining = [suite.name for suite in suites if in_degree[suite.name] > 0]
            cycle = _find_cycle(remaining, dependencies)
            logger.error(f"Cyclic dependency detected: {' -> '.join(cycle)}")
            raise CyclicDependencyError(cycle, unresolved=remaining)

        logger.debug(f"Dependency graph resolved: {' -> '.join(order)}")
        return cls(suites, dependencies, dependents, order)

    @property
    def topological_order(self) -> List[str]:
        return list(self._order)

    @property
    def suites(self) -> List[SuiteConfig]:
        return list(self._suites)

    def __len__(self) -> int:
        return len(self._suites)

    def __contains__(self, name: str) -> bool:
        return name in self._dependencies

    def dependencies_of(self, name: str) -> List[str]:
        """Suites that ``name`` waits on."""
        return list(self._dependencies[name])

    def dependents_of(self, name: str) -> List[str]:
        """Suites that wait on ``name``."""
        return list(self._dependents[name])

    def ready_suites(self, completed: Set[str]) -> List[SuiteConfig]:
        """All suites not yet completed whose dependencies are all completed."""
        return get_executable_suites(self._suites, completed)


def _find_cycle(remaining: List[str], dependencies: Dict[str, List[str]]) -> List[str]:
    """Walk dependency edges among unresolved nodes until one repeats."""
    unresolved = set(remaining)
    path: List[str] = []
    seen: Dict[str, int] = {}
    node = remaining[0]

    # Every unresolved node has at least one unresolved dependency
    while node not in seen:
        seen[node] = len(path)
        path.append(node)
        node = next(dep for dep in dependencies[node] if dep in unresolved)

    return path[seen[node]:]


def topological_sort(suites: Iterable[SuiteConfig]) -> List[str]:
    """Return suite names in a valid execution order."""
    return DependencyGraph.build(suites).topological_order


def get_executable_suites(suites: Iterable[SuiteConfig], completed: Set[str]) -> List[SuiteConfig]:
    """
    Filter suites down to those that may start now.

    A suite qualifies when it is not in ``completed`` and every entry of its
    ``depends_on`` is. Registration order is preserved.
    """
    return [
        suite for suite in suites
        if suite.name not in completed
        and all(dep in completed for dep in suite.depends_on)
    ]
