"""Build log backed by SQLite.

Design:
- One row per surviving build, unique on (job_name, number).
- A per-job allocation counter in ``job_numbers`` so numbers are never
  reused, even after the newest build is deleted.
- Deletion is a normal operation (retention); it leaves a gap.
- WAL journal mode for concurrent readers.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from paginatedbuilds.errors import DuplicateBuildError
from paginatedbuilds.models.builds import BuildRecord, BuildResult, JobRef, now_millis

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_BUILDS = """
CREATE TABLE IF NOT EXISTS builds (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    job_name           TEXT NOT NULL,
    number             INTEGER NOT NULL,
    display_name       TEXT NOT NULL,
    result             TEXT,
    start_time_millis  INTEGER NOT NULL DEFAULT 0,
    queue_time_millis  INTEGER NOT NULL DEFAULT 0,
    duration_millis    INTEGER NOT NULL DEFAULT 0,
    executor_label     TEXT NOT NULL DEFAULT '',
    UNIQUE (job_name, number)
);
"""

_CREATE_JOB_NUMBERS = """
CREATE TABLE IF NOT EXISTS job_numbers (
    job_name     TEXT PRIMARY KEY,
    last_number  INTEGER NOT NULL
);
"""

_SELECT_COLUMNS = (
    "number, display_name, result, start_time_millis, "
    "queue_time_millis, duration_millis, executor_label"
)


class SqliteBuildLog:
    """Persisted, sparse build history for any number of jobs.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created if it does not exist.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_CREATE_BUILDS)
            conn.execute(_CREATE_JOB_NUMBERS)

    # ------------------------------------------------------------------
    # Write side (build execution and retention)
    # ------------------------------------------------------------------

    def record_start(
        self,
        job: JobRef,
        *,
        queue_time_millis: int | None = None,
        start_time_millis: int | None = None,
        executor_label: str = "",
        display_name: str = "",
    ) -> BuildRecord:
        """Allocate the next build number and store a running build.

        Without an explicit ``queue_time_millis`` the build counts as queued
        one millisecond before it started.
        """
        start = start_time_millis if start_time_millis is not None else now_millis()
        queued = queue_time_millis if queue_time_millis is not None else start - 1
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO job_numbers (job_name, last_number) VALUES (?, 1)
                ON CONFLICT(job_name) DO UPDATE SET last_number = last_number + 1
                """,
                (job.name,),
            )
            (number,) = conn.execute(
                "SELECT last_number FROM job_numbers WHERE job_name = ?",
                (job.name,),
            ).fetchone()
            record = BuildRecord(
                number=number,
                display_name=display_name,
                start_time_millis=start,
                queue_time_millis=queued,
                executor_label=executor_label,
            )
            self._insert(conn, job, record)
        logger.debug("Started %s %s", job.name, record.display_name)
        return record

    def append(self, job: JobRef, record: BuildRecord) -> BuildRecord:
        """Store a record with an explicit number, e.g. when importing history.

        Raises
        ------
        DuplicateBuildError
            If the number is not beyond every number allocated so far.
        """
        with self._connect() as conn:
            row = conn.execute(
                "SELECT last_number FROM job_numbers WHERE job_name = ?",
                (job.name,),
            ).fetchone()
            allocated = row[0] if row else 0
            if record.number <= allocated:
                raise DuplicateBuildError(
                    f"{job.name} #{record.number} is not beyond #{allocated}"
                )
            conn.execute(
                """
                INSERT INTO job_numbers (job_name, last_number) VALUES (?, ?)
                ON CONFLICT(job_name) DO UPDATE SET last_number = excluded.last_number
                """,
                (job.name, record.number),
            )
            self._insert(conn, job, record)
        return record

    def complete(
        self,
        job: JobRef,
        number: int,
        result: BuildResult,
        duration_millis: int | None = None,
    ) -> BuildRecord:
        """Record the outcome of a running build.

        When ``duration_millis`` is omitted it is measured from the
        build's start time.
        """
        record = self.get_by_number(job, number)
        if record is None:
            raise KeyError(f"{job.name} #{number}")
        if duration_millis is None:
            duration_millis = max(now_millis() - record.start_time_millis, 0)
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE builds SET result = ?, duration_millis = ?
                WHERE job_name = ? AND number = ?
                """,
                (result.value, duration_millis, job.name, number),
            )
        return record.model_copy(
            update={"result": result, "duration_millis": duration_millis}
        )

    def delete(self, job: JobRef, number: int) -> bool:
        """Delete one build, leaving a gap.  Returns whether it existed."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM builds WHERE job_name = ? AND number = ?",
                (job.name, number),
            )
        return cursor.rowcount > 0

    def prune(self, job: JobRef, keep_last: int) -> list[int]:
        """Delete all but the newest ``keep_last`` surviving builds.

        Returns the deleted build numbers, newest first.
        """
        if keep_last < 0:
            raise ValueError("keep_last must be >= 0")
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT number FROM builds WHERE job_name = ?
                ORDER BY number DESC LIMIT -1 OFFSET ?
                """,
                (job.name, keep_last),
            ).fetchall()
            doomed = [row[0] for row in rows]
            conn.executemany(
                "DELETE FROM builds WHERE job_name = ? AND number = ?",
                [(job.name, n) for n in doomed],
            )
        if doomed:
            logger.info("Pruned %d build(s) from %s", len(doomed), job.name)
        return doomed

    @staticmethod
    def _insert(conn: sqlite3.Connection, job: JobRef, record: BuildRecord) -> None:
        conn.execute(
            """
            INSERT INTO builds
                (job_name, number, display_name, result, start_time_millis,
                 queue_time_millis, duration_millis, executor_label)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                job.name,
                record.number,
                record.display_name,
                record.result.value if record.result is not None else None,
                record.start_time_millis,
                record.queue_time_millis,
                record.duration_millis,
                record.executor_label,
            ),
        )

    # ------------------------------------------------------------------
    # Read side (BuildLog protocol)
    # ------------------------------------------------------------------

    def highest_number(self, job: JobRef) -> int | None:
        with self._connect() as conn:
            (highest,) = conn.execute(
                "SELECT MAX(number) FROM builds WHERE job_name = ?",
                (job.name,),
            ).fetchone()
        return highest

    def get_by_number(self, job: JobRef, number: int) -> BuildRecord | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM builds WHERE job_name = ? AND number = ?",
                (job.name, number),
            ).fetchone()
        return self._row_to_record(row) if row else None

    def list_job_names(self) -> list[str]:
        """Return every job that has ever allocated a build number."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT job_name FROM job_numbers ORDER BY job_name"
            ).fetchall()
        return [row[0] for row in rows]

    @staticmethod
    def _row_to_record(row: tuple) -> BuildRecord:
        (
            number,
            display_name,
            result,
            start_time_millis,
            queue_time_millis,
            duration_millis,
            executor_label,
        ) = row
        return BuildRecord(
            number=number,
            display_name=display_name,
            result=BuildResult(result) if result is not None else None,
            start_time_millis=start_time_millis,
            queue_time_millis=queue_time_millis,
            duration_millis=duration_millis,
            executor_label=executor_label,
        )
