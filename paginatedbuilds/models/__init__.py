"""paginatedbuilds data models — all Pydantic v2, all frozen (immutable)."""

from paginatedbuilds.models.builds import BuildRecord, BuildResult, JobRef
from paginatedbuilds.models.pages import (
    DEFAULT_PAGE_SIZE,
    BuildSummary,
    Page,
    PageOrder,
    PageRequest,
)
from paginatedbuilds.models.ranges import NumberRange

__all__ = [
    # builds
    "BuildResult",
    "BuildRecord",
    "JobRef",
    # ranges
    "NumberRange",
    # pages
    "DEFAULT_PAGE_SIZE",
    "PageOrder",
    "PageRequest",
    "BuildSummary",
    "Page",
]
