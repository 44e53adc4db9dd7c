"""Paginator — serve a page of a job's build history.

``start`` and ``size`` address *logical* positions among surviving
builds, not raw build numbers.  Because numbers can be missing, the
paginator works in three steps:

1. Guess the window of numbers the request would cover if the history
   had no gaps, sized exactly to the request.
2. Count the surviving builds ahead of that window.  Each missing number
   there means the logical start lies one surviving record further on,
   so that many records are skipped at the window's leading edge.
3. Resolve the window and, if it comes up short, let the
   ``WindowExpander`` pull more from beyond its trailing edge.

The highest build number is read once per request.  Every number is
visited at most once, in a strictly monotone walk, so a page never
holds duplicates, and builds arriving mid-request are not included.
"""

from __future__ import annotations

import logging
from typing import Any

from paginatedbuilds.config import config
from paginatedbuilds.core.build_log import BuildLog
from paginatedbuilds.core.projector import project
from paginatedbuilds.core.range_resolver import RangeResolver
from paginatedbuilds.core.window_expander import WindowExpander
from paginatedbuilds.models.builds import BuildRecord, JobRef, now_millis
from paginatedbuilds.models.pages import Page, PageOrder, PageRequest
from paginatedbuilds.models.ranges import NumberRange

logger = logging.getLogger(__name__)


class Paginator:
    """Public entry point for paged build history.

    Parameters
    ----------
    log:
        The build log to read.  Never written to.
    default_page_size:
        Size used when a request does not name one.  Defaults to
        ``config.default_page_size``.
    default_order:
        Page order used when a call does not name one.  Defaults to
        ``config.default_order``.
    expander:
        Window expander to use.  By default one is built from
        ``config.expansion_policy`` and ``config.expansion_batch_size``.
    """

    def __init__(
        self,
        log: BuildLog,
        *,
        default_page_size: int | None = None,
        default_order: PageOrder | None = None,
        expander: WindowExpander | None = None,
    ) -> None:
        self._resolver = RangeResolver(log)
        self._expander = expander or WindowExpander(
            self._resolver,
            policy=config.expansion_policy,
            batch_size=config.expansion_batch_size,
        )
        self._default_page_size = default_page_size or config.default_page_size
        self._default_order = default_order or config.default_order

    def page(
        self,
        job: JobRef,
        start: Any = None,
        size: Any = None,
        order: PageOrder | None = None,
    ) -> Page:
        """Serve a page from raw query values, applying defaults.

        Raises
        ------
        InvalidParameterError
            If ``start`` or ``size`` is given but not a positive integer.
        """
        request = PageRequest.parse(
            start, size, default_size=self._default_page_size
        )
        return self.get_page(job, request, order)

    def get_page(
        self,
        job: JobRef,
        request: PageRequest | None = None,
        order: PageOrder | None = None,
    ) -> Page:
        """Return logical positions ``start .. start+size-1`` as a ``Page``.

        A job with no builds, or a ``start`` beyond the surviving
        history, yields an empty page.
        """
        if request is None:
            request = PageRequest(size=self._default_page_size)
        records = self.get_records(job, request, order or self._default_order)
        now = now_millis()
        return Page(items=[project(job, record, now) for record in records])

    def get_records(
        self, job: JobRef, request: PageRequest, order: PageOrder
    ) -> list[BuildRecord]:
        """Resolve a request to raw build records, in page order."""
        highest = self._resolver.log.highest_number(job)
        if highest is None:
            return []

        window, prefix = self._candidate(highest, request, order)
        if not window:
            return []

        skip = (request.start - 1) - self._resolver.count(job, prefix)
        records = self._resolver.resolve(job, window, order)
        skip_beyond = max(skip - len(records), 0)
        records = records[skip:]
        logger.debug(
            "Resolved %s window %s for %s: %d record(s), skip %d",
            order.value, window, job.name, len(records), skip,
        )

        if len(records) < request.size:
            trailing = window.lower if order.descending else window.upper
            records += self._expander.expand(
                job,
                trailing,
                request.size - len(records),
                order,
                highest=highest,
                skip=skip_beyond,
            )
        return records[: request.size]

    @staticmethod
    def _candidate(
        highest: int, request: PageRequest, order: PageOrder
    ) -> tuple[NumberRange, NumberRange]:
        """Gap-free guess at the request's window and the numbers ahead of it."""
        if order.descending:
            upper = highest - request.start + 1
            window = NumberRange.between(upper - request.size + 1, upper)
            prefix = NumberRange.between(upper + 1, highest)
        else:
            window = NumberRange.between(
                request.start, min(request.end, highest)
            )
            prefix = NumberRange.between(1, request.start - 1)
        return window, prefix
