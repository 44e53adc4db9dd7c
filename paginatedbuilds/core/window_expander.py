"""WindowExpander — widen a short search window until a page fills up.

When gaps in the build history leave a resolved window short of the
requested size, the expander scans successive windows beyond a bound,
in the direction of the page order, and re-resolves each one:

- OLDEST_FIRST scans toward newer builds and stops at ``highest``.
- NEWEST_FIRST scans toward older builds and stops at build number 1.

Every pass advances the cursor by at least one number toward a fixed
end, so the loop always terminates, even over a fully deleted region.
Work is bounded by the deficit plus the size of the gaps crossed, never
by the total history length.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from paginatedbuilds.config import ExpansionPolicy
from paginatedbuilds.core.range_resolver import RangeResolver
from paginatedbuilds.models.builds import BuildRecord, JobRef
from paginatedbuilds.models.pages import PageOrder
from paginatedbuilds.models.ranges import NumberRange

logger = logging.getLogger(__name__)


class WindowExpander:
    """Pulls additional records from beyond a window's trailing edge.

    Parameters
    ----------
    resolver:
        Resolver used for every pass.
    policy:
        ``FIXED`` scans ``batch_size`` numbers per pass; ``DOUBLING``
        doubles the scan width after every pass.
    batch_size:
        Width of the first pass.  ``None`` starts with the number of
        records still wanted.
    """

    def __init__(
        self,
        resolver: RangeResolver,
        policy: ExpansionPolicy = ExpansionPolicy.DOUBLING,
        batch_size: int | None = None,
    ) -> None:
        if batch_size is not None and batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._resolver = resolver
        self._policy = policy
        self._batch_size = batch_size

    def expand(
        self,
        job: JobRef,
        bound: int,
        still_needed: int,
        order: PageOrder = PageOrder.OLDEST_FIRST,
        *,
        highest: int | None = None,
        skip: int = 0,
    ) -> list[BuildRecord]:
        """Collect up to ``still_needed`` records strictly beyond ``bound``.

        Parameters
        ----------
        bound:
            Last build number already searched.  Scanning starts at the
            next number along ``order``.
        still_needed:
            How many additional records to collect.
        highest:
            Upper limit for OLDEST_FIRST scans.  Read from the log when
            omitted; callers paginating pass the value they started with
            so builds arriving mid-request stay out of the page.
        skip:
            Surviving records to discard before collecting, used when
            gaps earlier in the history shift the logical start.

        Returns
        -------
        list[BuildRecord]
            At most ``still_needed`` records, in ``order``.  Fewer when
            the log is exhausted; empty when nothing is left.
        """
        if still_needed <= 0:
            return []
        if not order.descending and highest is None:
            highest = self._resolver.log.highest_number(job)
            if highest is None:
                return []

        step = self._batch_size or still_needed + skip
        cursor = bound
        collected: list[BuildRecord] = []
        passes = 0

        while len(collected) < still_needed:
            window = self._next_window(cursor, step, order, highest)
            if not window:
                break
            passes += 1
            records = self._resolver.resolve(job, window, order)
            if skip:
                dropped = min(skip, len(records))
                records = records[dropped:]
                skip -= dropped
            collected.extend(records[: still_needed - len(collected)])
            logger.debug(
                "Expansion pass %d for %s scanned %s, %d/%d collected",
                passes, job.name, window, len(collected), still_needed,
            )
            cursor = window.lower if order.descending else window.upper
            if self._policy is ExpansionPolicy.DOUBLING:
                step *= 2

        return collected

    def fill(
        self,
        job: JobRef,
        resolved: Sequence[BuildRecord],
        target: int,
        order: PageOrder = PageOrder.OLDEST_FIRST,
    ) -> list[BuildRecord]:
        """Top ``resolved`` up to ``target`` records from beyond its last one.

        Returns ``resolved`` followed by the additional records.  When
        the log holds fewer than ``target`` records past that point, the
        result is everything that exists.
        """
        records = list(resolved)
        if len(records) >= target:
            return records

        if records:
            bound = records[-1].number
        elif order.descending:
            highest = self._resolver.log.highest_number(job)
            if highest is None:
                return records
            bound = highest + 1
        else:
            bound = 0
        return records + self.expand(job, bound, target - len(records), order)

    @staticmethod
    def _next_window(
        cursor: int, step: int, order: PageOrder, highest: int | None
    ) -> NumberRange:
        if order.descending:
            return NumberRange.between(cursor - step, cursor - 1)
        if highest is None:
            raise ValueError("oldest-first windows need a highest build number")
        return NumberRange.between(cursor + 1, min(cursor + step, highest))
