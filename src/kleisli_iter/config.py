"""
Trace Configuration

Configuration dataclass and environment variable support for kleisli_iter
trace logging.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError


# =============================================================================
# Constants
# =============================================================================

DEFAULT_LOG_FILE = "kleisli_trace.log"
DEFAULT_LOG_LEVEL = "DEBUG"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


def _env_path(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    if not value:
        return None
    return Path(value)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class TraceConfig:
    """Configuration for kleisli_iter trace logging.

    ::: This is-in-layer Infrastructure-Layer.
    ::: This is a value-object.
    ::: This is stateless.
    ::: This is serializable.

    Supports environment variables:
    - KLEISLI_TRACE: Enable trace logging (default: false)
    - KLEISLI_TRACE_STDERR: Also log to stderr when tracing (default: true)
    - KLEISLI_LOG_DIR: Directory for the trace log file (default: none)
    - KLEISLI_LOG_FILE: Trace log file name (default: kleisli_trace.log)
    - KLEISLI_LOG_LEVEL: Level name for the package logger (default: DEBUG)
    """

    enabled: bool = field(default_factory=lambda: _env_flag("KLEISLI_TRACE", "false"))
    stderr: bool = field(default_factory=lambda: _env_flag("KLEISLI_TRACE_STDERR", "true"))

    # File output is only used when a directory is given
    log_dir: Optional[Path] = field(default_factory=lambda: _env_path("KLEISLI_LOG_DIR"))
    log_file: str = field(default_factory=lambda: os.environ.get("KLEISLI_LOG_FILE", DEFAULT_LOG_FILE))

    level: str = field(default_factory=lambda: os.environ.get("KLEISLI_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper())

    @property
    def level_number(self) -> int:
        """Numeric logging level for ``level``."""
        try:
            return _LEVELS[self.level.upper()]
        except KeyError:
            raise ConfigError(
                f"Unknown log level {self.level!r}; expected one of {', '.join(_LEVELS)}"
            ) from None

    @property
    def log_path(self) -> Optional[Path]:
        """Full path of the trace log file, or None when file output is off."""
        if self.log_dir is None:
            return None
        return Path(self.log_dir) / self.log_file

    def validate(self) -> list[str]:
        """Validate configuration and return list of warnings."""
        warnings = []

        if self.level.upper() not in _LEVELS:
            warnings.append(f"Unknown log level {self.level!r} - falling back to {DEFAULT_LOG_LEVEL}")

        if self.enabled and not self.stderr and self.log_dir is None:
            warnings.append("Tracing enabled with no stderr and no log directory - trace output is discarded")

        if self.log_dir is not None and not self.enabled:
            warnings.append("KLEISLI_LOG_DIR is set but tracing is disabled - no log file is written")

        return warnings

    @classmethod
    def from_env(cls) -> "TraceConfig":
        """Create configuration from environment variables."""
        return cls()

    @classmethod
    def for_testing(cls) -> "TraceConfig":
        """Create configuration for testing: tracing off, nothing read from the environment."""
        return cls(
            enabled=False,
            stderr=False,
            log_dir=None,
            log_file=DEFAULT_LOG_FILE,
            level=DEFAULT_LOG_LEVEL,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "enabled": self.enabled,
            "stderr": self.stderr,
            "log_dir": str(self.log_dir) if self.log_dir is not None else None,
            "log_file": self.log_file,
            "level": self.level,
        }


__all__ = [
    "TraceConfig",
    "DEFAULT_LOG_FILE",
    "DEFAULT_LOG_LEVEL",
]
