"""Build record models — the read-only view of a job's build history."""

from __future__ import annotations

import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


def now_millis() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class BuildResult(str, Enum):
    """Final outcome of a completed build.  Running builds have no result."""

    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"


class JobRef(BaseModel):
    """Opaque handle for a job.  Scopes every build log query."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)

    def __str__(self) -> str:
        return self.name


class BuildRecord(BaseModel):
    """A single build of a job, as held by the build log.

    Build numbers are assigned in strictly increasing order and never
    reused, even after the record is deleted by retention.
    """

    model_config = ConfigDict(frozen=True)

    number: int = Field(ge=1)
    display_name: str = ""
    result: BuildResult | None = None  # None while the build is running
    start_time_millis: int = 0
    queue_time_millis: int = 0
    duration_millis: int = 0
    executor_label: str = ""  # empty when built on the controller

    @model_validator(mode="after")
    def _default_display_name(self) -> BuildRecord:
        if not self.display_name:
            object.__setattr__(self, "display_name", f"#{self.number}")
        return self

    @property
    def is_running(self) -> bool:
        return self.result is None
