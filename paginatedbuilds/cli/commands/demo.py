"""``paginatedbuilds demo`` — seed a job with sample builds and gaps.

Runs a number of synthetic builds through the SQLite build log, then
deletes the requested build numbers the way a retention policy would,
and shows the first page of the resulting history.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from paginatedbuilds.config import config
from paginatedbuilds.core.paginator import Paginator
from paginatedbuilds.core.sqlite_build_log import SqliteBuildLog
from paginatedbuilds.errors import InvalidParameterError
from paginatedbuilds.models.builds import BuildResult, JobRef, now_millis
from paginatedbuilds.models.pages import PageOrder, PageRequest
from paginatedbuilds.models.ranges import NumberRange
from paginatedbuilds.views.renderer import PageRenderer

logger = logging.getLogger(__name__)
console = Console()

_OUTCOMES = [
    BuildResult.SUCCESS,
    BuildResult.SUCCESS,
    BuildResult.SUCCESS,
    BuildResult.UNSTABLE,
    BuildResult.FAILURE,
]


def demo_cmd(
    job_name: str = typer.Option(
        "demo-job",
        "--job",
        "-j",
        help="Name of the job to seed.",
    ),
    builds: int = typer.Option(
        20,
        "--builds",
        "-b",
        min=1,
        help="Number of builds to run.",
    ),
    gaps: str = typer.Option(
        "",
        "--gaps",
        "-g",
        help="Build numbers to delete afterwards, e.g. '3,7-9'.",
    ),
    seed: int = typer.Option(
        0,
        "--seed",
        help="Random seed for build outcomes and durations.",
    ),
    db: str = typer.Option(
        ".paginatedbuilds/demo-builds.db",
        "--db",
        help="Path to the build log SQLite database (uses demo-specific default).",
    ),
) -> None:
    """Seed a job with sample builds, delete some, and show the first page."""
    try:
        doomed = NumberRange.from_string(gaps) if gaps.strip() else NumberRange()
    except InvalidParameterError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=2)

    log = SqliteBuildLog(Path(db))
    job = JobRef(name=job_name)
    rng = random.Random(seed)

    console.print(
        Panel(
            f"[bold]Seeding {builds} build(s) of {job_name}[/bold]\n"
            f"Deleting afterwards: {doomed or 'nothing'}",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    first_number = None
    for _ in range(builds):
        started = now_millis()
        record = log.record_start(
            job,
            queue_time_millis=started - rng.randint(1, 5_000),
            start_time_millis=started,
            executor_label=rng.choice(["", "", "agent-1", "agent-2"]),
        )
        record = log.complete(
            job,
            record.number,
            rng.choice(_OUTCOMES),
            duration_millis=rng.randint(1_000, 600_000),
        )
        first_number = first_number or record.number

    removed = [n for n in doomed.ascending() if log.delete(job, n)]
    logger.info(
        "Seeded %s starting at #%s, deleted %d build(s)",
        job_name, first_number, len(removed),
    )

    console.print(f"[bold green]Job seeded:[/bold green] {job_name}  (db: {db})")
    if removed:
        console.print(f"[yellow]Deleted:[/yellow] {NumberRange.of(removed)}")
    console.print()

    request = PageRequest(size=config.default_page_size)
    order = PageOrder.NEWEST_FIRST
    page = Paginator(log).get_page(job, request, order)
    PageRenderer(console=console).print_page(job, page, request, order)
