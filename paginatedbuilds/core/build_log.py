"""The ``BuildLog`` protocol and an in-memory implementation.

A build log is an ordered, sparse store of build records keyed by build
number.  Pagination needs exactly two reads from it:

- ``highest_number(job)`` — the highest build number currently present.
- ``get_by_number(job, number)`` — the record, or ``None`` if absent.

``SqliteBuildLog`` (persisted) and ``InMemoryBuildLog`` (tests, demos)
both satisfy the protocol.
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from paginatedbuilds.errors import DuplicateBuildError
from paginatedbuilds.models.builds import BuildRecord, JobRef


@runtime_checkable
class BuildLog(Protocol):
    """Read side of a job's build history."""

    def highest_number(self, job: JobRef) -> int | None:
        """Return the highest build number present, or ``None`` if empty."""
        ...

    def get_by_number(self, job: JobRef, number: int) -> BuildRecord | None:
        """Return the record with this number, or ``None`` if absent."""
        ...


class InMemoryBuildLog:
    """Dict-backed build log.

    Keeps a count of ``get_by_number`` calls in ``lookups`` so callers
    can observe how much of the history a request touched.
    """

    def __init__(self) -> None:
        self._builds: dict[str, dict[int, BuildRecord]] = {}
        self._allocated: dict[str, int] = {}  # high-water mark, survives deletes
        self._lock = threading.Lock()
        self.lookups = 0

    def append(self, job: JobRef, record: BuildRecord) -> BuildRecord:
        with self._lock:
            allocated = self._allocated.get(job.name, 0)
            if record.number <= allocated:
                raise DuplicateBuildError(
                    f"{job.name} #{record.number} is not beyond #{allocated}"
                )
            self._builds.setdefault(job.name, {})[record.number] = record
            self._allocated[job.name] = record.number
        return record

    def replace(self, job: JobRef, record: BuildRecord) -> None:
        """Swap an existing record in place, e.g. when a build completes."""
        with self._lock:
            builds = self._builds.get(job.name, {})
            if record.number not in builds:
                raise KeyError(f"{job.name} #{record.number}")
            builds[record.number] = record

    def delete(self, job: JobRef, number: int) -> bool:
        with self._lock:
            return self._builds.get(job.name, {}).pop(number, None) is not None

    def highest_number(self, job: JobRef) -> int | None:
        with self._lock:
            builds = self._builds.get(job.name)
            return max(builds) if builds else None

    def get_by_number(self, job: JobRef, number: int) -> BuildRecord | None:
        with self._lock:
            self.lookups += 1
            return self._builds.get(job.name, {}).get(number)
