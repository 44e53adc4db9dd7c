"""Adversarial tests — history mutating while pages are being served.

New builds arrive and retention deletes old ones concurrently with
pagination.  Pages may shift between requests, but a single page must
never contain duplicates or break the ordering.
"""

from __future__ import annotations

import threading

import pytest

from paginatedbuilds.core.build_log import InMemoryBuildLog
from paginatedbuilds.core.paginator import Paginator
from paginatedbuilds.core.sqlite_build_log import SqliteBuildLog
from paginatedbuilds.models.builds import BuildRecord, JobRef
from paginatedbuilds.models.pages import PageOrder, PageRequest


def _numbers(page) -> list[int]:
    return [int(s.id) for s in page.items]


class _MutatingLog(InMemoryBuildLog):
    """Deletes and appends builds in the middle of every lookup sequence."""

    def __init__(self, job: JobRef, every: int) -> None:
        super().__init__()
        self._job = job
        self._every = every
        self._next_delete = 1

    def get_by_number(self, job: JobRef, number: int) -> BuildRecord | None:
        if self.lookups and self.lookups % self._every == 0:
            highest = self.highest_number(self._job) or 0
            self.append(self._job, BuildRecord(number=highest + 1))
            self.delete(self._job, self._next_delete)
            self._next_delete += 1
        return super().get_by_number(job, number)


class TestMutationDuringRequest:
    @pytest.mark.parametrize("order", list(PageOrder))
    def test_pages_stay_strictly_ordered(self, job: JobRef, seed, order: PageOrder):
        log = _MutatingLog(job, every=3)
        seed(log, job, 60, gaps=[10, 11, 30])
        paginator = Paginator(log, default_page_size=8)
        for start in range(1, 40, 5):
            numbers = _numbers(paginator.get_page(job, PageRequest(start=start, size=8), order))
            assert len(numbers) == len(set(numbers))
            expected = sorted(numbers, reverse=order.descending)
            assert numbers == expected

    def test_builds_arriving_mid_request_excluded(self, job: JobRef, seed):
        log = _MutatingLog(job, every=2)
        seed(log, job, 5)
        paginator = Paginator(log)
        numbers = _numbers(
            paginator.get_page(job, PageRequest(size=50), PageOrder.OLDEST_FIRST)
        )
        assert max(numbers) <= 5

    def test_fully_deleted_history(self, job: JobRef, seed):
        log = InMemoryBuildLog()
        seed(log, job, 500)
        for number in range(1, 500):
            log.delete(job, number)
        paginator = Paginator(log)
        for order in PageOrder:
            assert _numbers(paginator.get_page(job, PageRequest(size=3), order)) == [500]


class TestConcurrentWriters:
    def test_sqlite_pages_under_writer_threads(self, sqlite_log: SqliteBuildLog, job: JobRef, seed):
        seed(sqlite_log, job, 40)
        paginator = Paginator(sqlite_log)
        stop = threading.Event()
        errors: list[BaseException] = []

        def writer() -> None:
            number = 1
            try:
                while not stop.is_set() and number < 30:
                    sqlite_log.record_start(job)
                    sqlite_log.delete(job, number)
                    number += 1
            except BaseException as exc:  # surfaced by the assertion below
                errors.append(exc)

        thread = threading.Thread(target=writer)
        thread.start()
        try:
            for _ in range(15):
                for order in PageOrder:
                    numbers = _numbers(
                        paginator.get_page(job, PageRequest(start=3, size=6), order)
                    )
                    assert len(numbers) == len(set(numbers))
                    assert numbers == sorted(numbers, reverse=order.descending)
        finally:
            stop.set()
            thread.join()
        assert errors == []
