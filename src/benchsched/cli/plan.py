"""
Suite Plan Loading

Reads a YAML plan describing suites, their benchmark import paths and
dependencies, and turns it into SuiteConfig objects.

Example plan::

    name: Nightly
    parallel:
      enabled: true
      max_workers: 2
    continue_on_error: true
    suites:
      - name: parse
        benchmark: "mybench.parsing:suite"
      - name: render
        benchmark: "mybench.rendering:suite"
        depends_on: [parse]
"""

import importlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..core.config import ParallelConfig
from ..core.exceptions import ConfigurationError, DuplicateSuiteError
from ..scheduler.benchmark import FunctionBenchmark
from ..scheduler.types import SuiteConfig
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SuitePlan:
    """Parsed contents of a plan file."""
    name: str
    suites: List[SuiteConfig]
    parallel: Optional[ParallelConfig] = None
    continue_on_error: Optional[bool] = None
    timeout: Optional[float] = None
    thresholds: Dict[str, Any] = field(default_factory=dict)


def resolve_benchmark(target: str) -> Any:
    """
    Import ``module:attr`` and return a Benchmark.

    Objects with a ``run`` method are used as-is; classes are instantiated
    first; other callables are wrapped in a FunctionBenchmark.
    """
    module_name, sep, attr_path = target.partition(':')
    if not sep or not module_name or not attr_path:
        raise ConfigurationError(f"Benchmark target must look like 'module:attr', got {target!r}")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import benchmark module {module_name!r}: {e}") from e

    for part in attr_path.split('.'):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigurationError(f"{module_name!r} has no attribute {attr_path!r}") from e

    if isinstance(obj, type):
        obj = obj()
    if callable(getattr(obj, 'run', None)):
        return obj
    if callable(obj):
        return FunctionBenchmark(obj, name=attr_path)

    raise ConfigurationError(f"Benchmark target {target!r} is neither runnable nor callable")


def load_plan(path: Path) -> SuitePlan:
    """Load and validate a plan file."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict) or not isinstance(data.get('suites'), list):
        raise ConfigurationError(f"Plan {path} must be a mapping with a 'suites' list")

    suites = []
    seen = set()
    for index, entry in enumerate(data['suites']):
        if not isinstance(entry, dict) or 'name' not in entry or 'benchmark' not in entry:
            raise ConfigurationError(
                f"Suite entry #{index} in {path} needs 'name' and 'benchmark'"
            )
        if str(entry['name']) in seen:
            raise DuplicateSuiteError(str(entry['name']))
        seen.add(str(entry['name']))
        suites.append(SuiteConfig(
            name=str(entry['name']),
            benchmark=resolve_benchmark(entry['benchmark']),
            depends_on=[str(dep) for dep in entry.get('depends_on') or []],
            tags=[str(tag) for tag in entry.get('tags') or []],
        ))

    parallel = None
    if isinstance(data.get('parallel'), dict):
        try:
            parallel = ParallelConfig(**data['parallel'])
        except TypeError as e:
            raise ConfigurationError(f"Invalid parallel section in {path}: {e}") from e
        parallel.validate()

    plan = SuitePlan(
        name=data.get('name', path.stem),
        suites=suites,
        parallel=parallel,
        continue_on_error=data.get('continue_on_error'),
        timeout=data.get('timeout'),
        thresholds=data.get('thresholds') or {},
    )
    logger.info(f"Loaded plan {plan.name!r} with {len(suites)} suites from {path}")
    return plan
