"""paginatedbuilds: paged views over a job's sparse build history.

Serves bounded pages of build summaries addressed by logical position,
tolerating gaps left by deleted builds:
  - Range resolution against a sparse build log
  - Bounded window expansion to fill short pages
  - SQLite-backed build log with retention
  - Typer/Rich CLI
"""

__version__ = "1.0.0"
__description__ = "Paginated views over sparse build histories"

from paginatedbuilds.core.paginator import Paginator
from paginatedbuilds.models.builds import BuildRecord, BuildResult, JobRef
from paginatedbuilds.models.pages import Page, PageOrder, PageRequest

__all__ = [
    "Paginator",
    "BuildRecord",
    "BuildResult",
    "JobRef",
    "Page",
    "PageOrder",
    "PageRequest",
    "__version__",
]
