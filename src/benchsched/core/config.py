"""
Configuration Management

Centralized configuration management with YAML file support and
environment variable overrides for the suite scheduler.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError

load_dotenv()

DEFAULT_MAX_WORKERS = 4


@dataclass
class ParallelConfig:
    """Parallel execution settings."""
    enabled: bool = False
    max_workers: Optional[int] = None

    def effective_max_workers(self) -> int:
        """Number of permits the scheduler should hand out."""
        if not self.enabled:
            return 1
        if self.max_workers is None:
            return DEFAULT_MAX_WORKERS
        return self.max_workers

    def validate(self) -> None:
        if self.max_workers is not None:
            if isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int):
                raise ConfigurationError(
                    "parallel.max_workers must be an integer",
                    {"max_workers": self.max_workers},
                )
            if self.max_workers < 1:
                raise ConfigurationError(
                    "parallel.max_workers must be greater than 0",
                    {"max_workers": self.max_workers},
                )


@dataclass
class SchedulerConfig:
    """Scheduler behaviour configuration."""
    parallel: ParallelConfig = field(default_factory=ParallelConfig)
    continue_on_error: bool = False
    suite_timeout: Optional[float] = None  # seconds, None disables


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    console_level: str = "WARNING"  # Separate level for console output
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = "logs/benchsched.log"
    max_size: str = "10MB"
    backup_count: int = 5
    json: bool = False


@dataclass
class ReportingConfig:
    """Reporting configuration."""
    report_name: str = "Benchmark Report"
    export_path: str = "./reports"
    include_environment: bool = True
    include_git: bool = True


@dataclass
class AppConfig:
    """Main application configuration."""
    name: str = "benchsched"
    version: str = "0.1.0"
    environment: str = "production"
    debug: bool = False

    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ConfigurationError(
                f"Configuration file {config_path} must contain a mapping"
            )

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "AppConfig":
        """Build configuration from a plain dictionary."""
        config_data = cls._apply_env_overrides(dict(config_data))

        # Handle nested app configuration structure
        if 'app' in config_data:
            app_config = config_data.pop('app')
            config_data.update(app_config)

        try:
            if 'scheduler' in config_data and isinstance(config_data['scheduler'], dict):
                scheduler_data = dict(config_data['scheduler'])
                if 'parallel' in scheduler_data and isinstance(scheduler_data['parallel'], dict):
                    scheduler_data['parallel'] = ParallelConfig(**scheduler_data['parallel'])
                config_data['scheduler'] = SchedulerConfig(**scheduler_data)

            if 'logging' in config_data and isinstance(config_data['logging'], dict):
                config_data['logging'] = LoggingConfig(**config_data['logging'])

            if 'reporting' in config_data and isinstance(config_data['reporting'], dict):
                config_data['reporting'] = ReportingConfig(**config_data['reporting'])

            config = cls(**config_data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        config.validate()
        return config

    def validate(self) -> None:
        """Validate cross-field constraints."""
        self.scheduler.parallel.validate()
        timeout = self.scheduler.suite_timeout
        if timeout is not None and timeout <= 0:
            raise ConfigurationError(
                "scheduler.suite_timeout must be positive",
                {"suite_timeout": timeout},
            )

    @staticmethod
    def _apply_env_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        env_mappings = {
            'BENCHSCHED_PARALLEL': (['scheduler', 'parallel', 'enabled'], _parse_bool),
            'BENCHSCHED_MAX_WORKERS': (['scheduler', 'parallel', 'max_workers'], int),
            'BENCHSCHED_CONTINUE_ON_ERROR': (['scheduler', 'continue_on_error'], _parse_bool),
            'LOG_LEVEL': (['logging', 'level'], str),
            'DEBUG': (['debug'], _parse_bool),
            'ENVIRONMENT': (['environment'], str),
        }

        for env_var, (config_path, convert) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                try:
                    value = convert(env_value)
                except ValueError as e:
                    raise ConfigurationError(
                        f"Invalid value for {env_var}: {env_value!r}"
                    ) from e
                current = config_data
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = value

        return config_data


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ('1', 'true', 'yes', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(value)


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config(config_path: Optional[Path] = None) -> AppConfig:
    """Get the application configuration instance."""
    global _config

    if _config is None:
        if config_path is None:
            config_path = Path("config/default.yaml")

        if config_path.exists():
            _config = AppConfig.from_yaml(config_path)
        else:
            _config = AppConfig.from_dict({})

    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance (useful for testing)."""
    global _config
    _config = config


def reload_config(config_path: Optional[Path] = None) -> AppConfig:
    """Reload configuration from file."""
    global _config
    _config = None
    return get_config(config_path)
