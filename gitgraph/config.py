"""Configuration loading from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from gitgraph.core.storage import get_default_db_path

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    log_file: Path | None = None
    workers: int = 1
    db_path: Path | None = None

    def with_overrides(self, **changes: object) -> Settings:
        """Copy with every non-None keyword applied, for CLI options."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def resolve_db_path(self, project_root: Path) -> Path:
        return self.db_path if self.db_path is not None else get_default_db_path(project_root)


def parse_int_env(name: str, default: int, *, min_value: int | None = None) -> int:
    """Parse an integer environment variable; bad or too small values fall back."""
    try:
        value = int(os.getenv(name, str(default)))
    except ValueError:
        return default
    if min_value is not None and value < min_value:
        return default
    return value


def load_settings() -> Settings:
    log_level = os.getenv("GITGRAPH_LOG_LEVEL", "WARNING").strip().upper()
    if log_level not in _LOG_LEVELS:
        log_level = "WARNING"
    log_file = os.getenv("GITGRAPH_LOG_FILE", "").strip()
    db_path = os.getenv("GITGRAPH_DB_PATH", "").strip()
    return Settings(
        log_level=log_level,
        log_file=Path(log_file) if log_file else None,
        workers=parse_int_env("GITGRAPH_WORKERS", 1, min_value=1),
        db_path=Path(db_path) if db_path else None,
    )
