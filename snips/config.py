"""
Resolved configuration for a snips run.

The CLI turns its flags (and ``SNIPS_*`` environment variables, optionally
loaded from a ``.env`` file) into a SnipsConfig; the pipeline consumes it.
"""

import logging
from pathlib import Path
from typing import List

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from snips.schemas import ReconcileMode

ENV_WORKERS = "SNIPS_WORKERS"
ENV_LOG_LEVEL = "SNIPS_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_environment() -> None:
    """Load a .env file from the working directory upwards, without overriding the environment."""
    load_dotenv(find_dotenv(usecwd=True), override=False)


class SnipsConfig(BaseModel):
    """Everything a run needs once flags have been parsed."""
    mode: ReconcileMode = Field(default=ReconcileMode.WRITE, description="WRITE, CHECK or DIFF")
    quiet: bool = Field(default=False, description="Suppress non-error output")
    files: List[Path] = Field(default_factory=list, description="Documentation files to process")
    workers: int = Field(default=1, ge=1, description="Parallel document workers")
    log_level: str = Field(default="WARNING", description="Logging level for the snips logger")

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        """Accept any casing; reject unknown level names."""
        level = str(v).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level

    @classmethod
    def from_flags(
        cls,
        check: bool = False,
        diff: bool = False,
        **kwargs
    ) -> "SnipsConfig":
        """
        Build a config from CLI-style boolean mode flags.

        Raises:
            ValueError: Both check and diff were requested
        """
        if check and diff:
            raise ValueError("--check and --diff cannot be used together")

        if check:
            mode = ReconcileMode.CHECK
        elif diff:
            mode = ReconcileMode.DIFF
        else:
            mode = ReconcileMode.WRITE
        return cls(mode=mode, **kwargs)

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)
