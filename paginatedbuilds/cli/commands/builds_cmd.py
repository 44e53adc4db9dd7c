"""``paginatedbuilds builds JOB`` — show one page of a job's build history.

Prints a Rich table by default, or the JSON document clients consume
with ``--json``.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from paginatedbuilds.config import config
from paginatedbuilds.core.paginator import Paginator
from paginatedbuilds.core.sqlite_build_log import SqliteBuildLog
from paginatedbuilds.errors import InvalidParameterError
from paginatedbuilds.models.builds import JobRef
from paginatedbuilds.models.pages import PageOrder, PageRequest
from paginatedbuilds.views.renderer import PageRenderer

console = Console()


def builds_cmd(
    job_name: str = typer.Argument(
        ...,
        help="Name of the job whose history to show.",
    ),
    start: int = typer.Option(
        None,
        "--start",
        "-s",
        help="1-based logical position of the first build (default 1).",
    ),
    size: int = typer.Option(
        None,
        "--size",
        "-n",
        help="Number of builds per page (default from config).",
    ),
    order: PageOrder = typer.Option(
        None,
        "--order",
        "-o",
        help="Count positions from the oldest or the newest build.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the page as JSON instead of a table.",
    ),
    db: str = typer.Option(
        str(config.build_log_path),
        "--db",
        help="Path to the build log SQLite database.",
    ),
) -> None:
    """Show one page of a job's build history."""
    db_path = Path(db)
    if not db_path.exists():
        console.print(f"[bold red]Build log not found:[/bold red] {db}")
        console.print("[dim]Seed one first with: paginatedbuilds demo[/dim]")
        raise typer.Exit(code=1)

    job = JobRef(name=job_name)
    order = order or config.default_order
    paginator = Paginator(SqliteBuildLog(db_path))
    try:
        request = PageRequest.parse(start, size, default_size=config.default_page_size)
    except InvalidParameterError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=2)

    page = paginator.get_page(job, request, order)
    if as_json:
        typer.echo(page.to_json(indent=2))
        return
    PageRenderer(console=console).print_page(job, page, request, order)
