"""Seeding configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_SEED_FILE = "seed.yaml"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class SeedConfig:
    """Configuration for a seed run.

    database_url supports sqlite:/// and postgresql:// URL schemes and
    may be None for dry runs, which never connect.
    """

    seed_file: Path
    database_url: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> SeedConfig:
        """Create config from environment variables.

        Reads:
        1. DATABASE_URL: target database (required unless dry run)
        2. DBLOAD_FILE: seed file path (default seed.yaml)
        3. DBLOAD_LOG_LEVEL: logging level name (default WARNING)
        """
        return cls(
            seed_file=Path(os.environ.get("DBLOAD_FILE") or DEFAULT_SEED_FILE),
            database_url=os.environ.get("DATABASE_URL") or None,
            log_level=os.environ.get("DBLOAD_LOG_LEVEL") or DEFAULT_LOG_LEVEL,
        )

    @property
    def sqlalchemy_url(self) -> str:
        """URL suitable for SQLAlchemy engine creation.

        Ensures postgresql:// URLs use the psycopg (v3) driver since
        the project depends on psycopg[binary], not psycopg2.

        Raises:
            ValueError: If no database URL is configured
        """
        if not self.database_url:
            raise ValueError("DATABASE_URL is required")
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+psycopg://", 1)
        if self.database_url.startswith("postgres://"):
            return self.database_url.replace("postgres://", "postgresql+psycopg://", 1)
        return self.database_url
