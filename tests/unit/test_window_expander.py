"""Tests for the WindowExpander — bounded widening past gaps."""

from __future__ import annotations

import pytest

from paginatedbuilds.config import ExpansionPolicy
from paginatedbuilds.core.range_resolver import RangeResolver
from paginatedbuilds.core.window_expander import WindowExpander
from paginatedbuilds.models.pages import PageOrder
from paginatedbuilds.models.ranges import NumberRange


def _numbers(records) -> list[int]:
    return [r.number for r in records]


class TestFill:
    def test_exhausts_log_instead_of_reaching_target(
        self, memory_log, job, seed, resolver: RangeResolver, expander: WindowExpander
    ):
        """Window 1-8 of a 10-build job topped up to 15 yields all 10 builds."""
        seed(memory_log, job, 10)
        raw = resolver.resolve(job, NumberRange.from_string("1-8"), PageOrder.OLDEST_FIRST)
        assert len(raw) == 8

        additional = expander.fill(job, raw, 15)

        assert len(additional) == 10
        assert _numbers(additional) == list(range(1, 11))

    def test_already_full(self, memory_log, job, seed, resolver, expander: WindowExpander):
        seed(memory_log, job, 10)
        raw = resolver.resolve(job, NumberRange.between(1, 4), PageOrder.OLDEST_FIRST)
        assert _numbers(expander.fill(job, raw, 3)) == [1, 2, 3, 4]

    def test_from_nothing_newest_first(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 5)
        assert _numbers(expander.fill(job, [], 3, PageOrder.NEWEST_FIRST)) == [5, 4, 3]

    def test_from_nothing_oldest_first(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 5, gaps=[1])
        assert _numbers(expander.fill(job, [], 3)) == [2, 3, 4]

    def test_empty_log(self, job, expander: WindowExpander):
        assert expander.fill(job, [], 5, PageOrder.NEWEST_FIRST) == []
        assert expander.fill(job, [], 5) == []


class TestExpand:
    def test_toward_newer_builds(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 10)
        assert _numbers(expander.expand(job, 8, 7)) == [9, 10]

    def test_toward_older_builds_across_gap(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 10, gaps=[5, 6])
        records = expander.expand(job, 8, 3, PageOrder.NEWEST_FIRST)
        assert _numbers(records) == [7, 4, 3]

    def test_nothing_needed(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 10)
        assert expander.expand(job, 3, 0) == []
        assert memory_log.lookups == 0

    def test_fully_sparse_terminates(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 10, gaps=range(1, 11))
        records = expander.expand(job, 11, 5, PageOrder.NEWEST_FIRST)
        assert records == []
        assert memory_log.lookups == 10

    def test_stops_at_build_one(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 3)
        assert _numbers(expander.expand(job, 3, 50, PageOrder.NEWEST_FIRST)) == [2, 1]
        assert memory_log.lookups == 2

    def test_respects_highest_snapshot(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 10)
        assert _numbers(expander.expand(job, 5, 10, highest=7)) == [6, 7]

    def test_skip_discards_leading_records(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 10, gaps=[2])
        assert _numbers(expander.expand(job, 0, 2, skip=3)) == [5, 6]

    def test_work_bounded_by_deficit(self, memory_log, job, seed, expander: WindowExpander):
        seed(memory_log, job, 1_000)
        assert _numbers(expander.expand(job, 0, 5)) == [1, 2, 3, 4, 5]
        assert memory_log.lookups == 5

    def test_fixed_batches(self, memory_log, job, seed, resolver: RangeResolver):
        seed(memory_log, job, 10, gaps=range(3, 9))
        fixed = WindowExpander(resolver, policy=ExpansionPolicy.FIXED, batch_size=2)
        assert _numbers(fixed.expand(job, 0, 3)) == [1, 2, 9]
        assert memory_log.lookups == 10

    def test_doubling_covers_large_gap_in_few_passes(
        self, memory_log, job, seed, resolver: RangeResolver
    ):
        seed(memory_log, job, 200, gaps=range(2, 200))
        doubling = WindowExpander(resolver, policy=ExpansionPolicy.DOUBLING, batch_size=1)
        calls = []
        original = resolver.resolve

        def counting_resolve(*args, **kwargs):
            calls.append(args[1])
            return original(*args, **kwargs)

        resolver.resolve = counting_resolve
        assert _numbers(doubling.expand(job, 0, 2)) == [1, 200]
        # widths 1, 2, 4, ..., 64 then 128 clipped to the highest build
        assert len(calls) == 8

    def test_invalid_batch_size(self, resolver: RangeResolver):
        with pytest.raises(ValueError):
            WindowExpander(resolver, batch_size=0)

    def test_oldest_first_window_needs_highest(self):
        with pytest.raises(ValueError):
            WindowExpander._next_window(0, 5, PageOrder.OLDEST_FIRST, None)
        window = WindowExpander._next_window(6, 5, PageOrder.NEWEST_FIRST, None)
        assert window == NumberRange.between(1, 5)
