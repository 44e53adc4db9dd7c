"""Shared test fixtures for paginatedbuilds."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from paginatedbuilds.config import ExpansionPolicy
from paginatedbuilds.core.build_log import InMemoryBuildLog
from paginatedbuilds.core.paginator import Paginator
from paginatedbuilds.core.range_resolver import RangeResolver
from paginatedbuilds.core.sqlite_build_log import SqliteBuildLog
from paginatedbuilds.core.window_expander import WindowExpander
from paginatedbuilds.models.builds import BuildRecord, BuildResult, JobRef
from paginatedbuilds.models.pages import PageOrder

# Fixed clock so summaries are deterministic
BASE_MILLIS = 1_700_000_000_000


def completed_build(number: int, **overrides) -> BuildRecord:
    """A successful build with plausible, strictly ordered timestamps."""
    start = BASE_MILLIS + number * 60_000
    defaults = {
        "number": number,
        "result": BuildResult.SUCCESS,
        "queue_time_millis": start - 250,
        "start_time_millis": start,
        "duration_millis": 1_000 + number,
        "executor_label": "",
    }
    defaults.update(overrides)
    return BuildRecord(**defaults)


@pytest.fixture
def make_build() -> Callable[..., BuildRecord]:
    """Factory fixture: build a completed BuildRecord with sensible defaults."""
    return completed_build


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def job() -> JobRef:
    return JobRef(name="TestJob")


@pytest.fixture
def memory_log() -> InMemoryBuildLog:
    """Provide an empty in-memory build log."""
    return InMemoryBuildLog()


@pytest.fixture
def sqlite_log(tmp_dir: Path) -> SqliteBuildLog:
    """Provide a fresh SqliteBuildLog backed by a temp database."""
    return SqliteBuildLog(tmp_dir / "builds.db")


@pytest.fixture
def seed() -> Callable[..., None]:
    """Factory fixture: append builds 1..count, then delete ``gaps``."""

    def _seed(
        log: InMemoryBuildLog | SqliteBuildLog,
        job: JobRef,
        count: int,
        gaps: Iterable[int] = (),
    ) -> None:
        for number in range(1, count + 1):
            log.append(job, completed_build(number))
        for number in gaps:
            log.delete(job, number)

    return _seed


@pytest.fixture
def resolver(memory_log: InMemoryBuildLog) -> RangeResolver:
    return RangeResolver(memory_log)


@pytest.fixture
def expander(resolver: RangeResolver) -> WindowExpander:
    return WindowExpander(resolver, policy=ExpansionPolicy.DOUBLING)


@pytest.fixture
def paginator(memory_log: InMemoryBuildLog) -> Paginator:
    """Paginator over the in-memory log with pinned defaults."""
    return Paginator(
        memory_log,
        default_page_size=10,
        default_order=PageOrder.OLDEST_FIRST,
    )
