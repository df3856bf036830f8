"""
InitializerConfig — Worker pool settings for init_components()

Environment variables:
- GULP_INIT_WORKERS: Threads running component tasks (default: 4)
"""

import os
from dataclasses import dataclass


@dataclass
class InitializerConfig:
    """Pool sizing for the component join."""

    workers: int = 4
    thread_name_prefix: str = "gulp-init-"

    @classmethod
    def from_env(cls) -> 'InitializerConfig':
        """Load configuration from environment variables."""
        return cls(workers=_get_int_env("GULP_INIT_WORKERS", 4))

    def validate(self) -> None:
        """Validate configuration values."""
        if self.workers < 1:
            raise ValueError("GULP_INIT_WORKERS must be >= 1")


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key, "")
    if value:
        try:
            return int(value)
        except ValueError:
            pass
    return default
