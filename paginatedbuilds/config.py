"""Runtime configuration — env-driven via pydantic-settings.

Reads from a .env file and PAGINATEDBUILDS_* environment variables.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from paginatedbuilds.models.pages import DEFAULT_PAGE_SIZE, PageOrder


class ExpansionPolicy(str, Enum):
    """How the window expander grows its search window between passes."""

    FIXED = "fixed"  # every pass scans the same number of build numbers
    DOUBLING = "doubling"  # each pass scans twice as many as the previous


class BuildsConfig(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export PAGINATEDBUILDS_LOG_LEVEL=DEBUG
        export PAGINATEDBUILDS_BUILD_LOG_PATH=/data/builds.db
        export PAGINATEDBUILDS_EXPANSION_POLICY=fixed
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PAGINATEDBUILDS_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Storage
    build_log_path: Path = Path(".paginatedbuilds/builds.db")

    # Pagination
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    default_order: PageOrder = PageOrder.OLDEST_FIRST

    # Window expansion; batch size None means "start with the deficit"
    expansion_policy: ExpansionPolicy = ExpansionPolicy.DOUBLING
    expansion_batch_size: int | None = Field(default=None, ge=1)

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton — import as `from paginatedbuilds.config import config`
config = BuildsConfig()
