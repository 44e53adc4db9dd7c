"""RangeResolver — turn a set of wanted build numbers into existing records."""

from __future__ import annotations

from paginatedbuilds.core.build_log import BuildLog
from paginatedbuilds.models.builds import BuildRecord, JobRef
from paginatedbuilds.models.pages import PageOrder
from paginatedbuilds.models.ranges import NumberRange


class RangeResolver:
    """Resolves a ``NumberRange`` against a build log.

    Numbers missing from the log (deleted, never materialized) are
    skipped silently.  Gaps are a steady-state fact, not an error.
    """

    def __init__(self, log: BuildLog) -> None:
        self._log = log

    @property
    def log(self) -> BuildLog:
        return self._log

    def resolve(
        self,
        job: JobRef,
        numbers: NumberRange,
        order: PageOrder = PageOrder.NEWEST_FIRST,
    ) -> list[BuildRecord]:
        """Return the records present in ``numbers``, in ``order``."""
        walk = numbers.descending() if order.descending else numbers.ascending()
        records: list[BuildRecord] = []
        for number in walk:
            record = self._log.get_by_number(job, number)
            if record is not None:
                records.append(record)
        return records

    def count(self, job: JobRef, numbers: NumberRange) -> int:
        """Return how many numbers of the range are present in the log."""
        return sum(
            1
            for number in numbers.ascending()
            if self._log.get_by_number(job, number) is not None
        )
