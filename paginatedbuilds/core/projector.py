"""Project build records into client-facing summaries."""

from __future__ import annotations

from paginatedbuilds.models.builds import BuildRecord, JobRef, now_millis
from paginatedbuilds.models.pages import BuildSummary


def project(
    job: JobRef, record: BuildRecord, now: int | None = None
) -> BuildSummary:
    """Map a build record to its ``BuildSummary``.

    A running build has no result and reports the time elapsed since it
    started as its duration.
    """
    if record.is_running:
        current = now if now is not None else now_millis()
        duration = max(current - record.start_time_millis, 0)
        result = None
    else:
        duration = record.duration_millis
        result = record.result.value

    return BuildSummary(
        full_name=f"{job.name} {record.display_name}",
        result=result,
        duration=duration,
        start_time_millis=record.start_time_millis,
        id=str(record.number),
        queue_time_millis=record.queue_time_millis,
        built_on=record.executor_label,
    )
