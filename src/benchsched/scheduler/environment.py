"""
Environment Metadata

Collects host and repository information embedded verbatim in the
RunReport header.
"""

import os
import platform
import socket
import subprocess
from typing import Any, Dict

from ..utils.logging import get_logger

logger = get_logger(__name__)


def get_git_info(cwd: str = None) -> Dict[str, Any]:
    """
    Get commit, branch and dirty flag of the current git checkout.

    Returns an empty dict when git is unavailable or ``cwd`` is not a
    repository.
    """
    def _git(*args: str) -> str:
        return subprocess.run(
            ['git', *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        ).stdout.strip()

    try:
        commit = _git('rev-parse', '--short', 'HEAD')
        branch = _git('rev-parse', '--abbrev-ref', 'HEAD')
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Git information unavailable: {e}")
        return {}

    try:
        dirty = bool(_git('status', '--porcelain'))
    except (OSError, subprocess.SubprocessError):
        dirty = False

    return {'commit': commit, 'branch': branch, 'dirty': dirty}


class EnvironmentCollector:
    """Collects platform, interpreter and hardware metadata."""

    def __init__(self, include_git: bool = True):
        self.include_git = include_git

    def collect_basic(self) -> Dict[str, Any]:
        return {
            'platform': platform.system().lower(),
            'arch': platform.machine(),
            'runtime_version': platform.python_version(),
        }

    def collect(self) -> Dict[str, Any]:
        """Collect the full environment metadata."""
        env = self.collect_basic()
        env.update({
            'python_implementation': platform.python_implementation(),
            'cpu_cores': os.cpu_count(),
            'os_version': platform.release(),
            'hostname': socket.gethostname(),
        })

        if self.include_git:
            git_info = get_git_info()
            if git_info:
                env['git_commit'] = git_info['commit']
                env['git_branch'] = git_info['branch']
                env['git_dirty'] = git_info['dirty']

        return env

    def get_summary(self) -> str:
        env = self.collect()
        parts = [f"{env['platform']} {env['arch']}", f"Python {env['runtime_version']}"]
        if env.get('cpu_cores'):
            parts.append(f"{env['cpu_cores']} cores")
        return " | ".join(parts)
