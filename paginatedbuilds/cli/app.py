"""Main Typer application — imports and registers all CLI commands.

Entry point: ``paginatedbuilds`` (configured via pyproject.toml scripts).

Commands: builds, demo, prune, jobs.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console

from paginatedbuilds.cli.commands.builds_cmd import builds_cmd
from paginatedbuilds.cli.commands.demo import demo_cmd
from paginatedbuilds.config import config
from paginatedbuilds.core.sqlite_build_log import SqliteBuildLog
from paginatedbuilds.models.builds import JobRef
from paginatedbuilds.models.ranges import NumberRange

app = typer.Typer(
    name="paginatedbuilds",
    help="paginatedbuilds: paged views over sparse build histories.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
app.command(name="builds", help="Show one page of a job's build history.")(builds_cmd)
app.command(name="demo", help="Seed a job with sample builds and gaps.")(demo_cmd)


@app.command(name="prune", help="Delete all but the newest builds of a job.")
def prune_cmd(
    job_name: str = typer.Argument(..., help="Job to prune."),
    keep: int = typer.Option(..., "--keep", "-k", min=0, help="Builds to keep."),
    db: str = typer.Option(
        str(config.build_log_path), "--db", help="Path to the build log database."
    ),
) -> None:
    """Apply a keep-last-N retention policy to one job."""
    console = Console()
    db_path = Path(db)
    if not db_path.exists():
        console.print(f"[bold red]Build log not found:[/bold red] {db}")
        raise typer.Exit(code=1)

    deleted = SqliteBuildLog(db_path).prune(JobRef(name=job_name), keep_last=keep)
    if not deleted:
        console.print(f"[dim]Nothing to prune for {job_name}.[/dim]")
        return
    console.print(
        f"[yellow]Deleted {len(deleted)} build(s):[/yellow] {NumberRange.of(deleted)}"
    )


@app.command(name="jobs", help="List the jobs in the build log.")
def jobs_cmd(
    db: str = typer.Option(
        str(config.build_log_path), "--db", help="Path to the build log database."
    ),
) -> None:
    """List every job that has recorded builds, with its newest build number."""
    from rich.table import Table

    console = Console()
    db_path = Path(db)
    if not db_path.exists():
        console.print(f"[bold red]Build log not found:[/bold red] {db}")
        raise typer.Exit(code=1)

    log = SqliteBuildLog(db_path)
    names = log.list_job_names()
    if not names:
        console.print("[dim]No jobs recorded.[/dim]")
        return

    table = Table(title="Jobs")
    table.add_column("Job", style="cyan")
    table.add_column("Newest build", justify="right")
    for name in names:
        highest = log.highest_number(JobRef(name=name))
        table.add_row(name, f"#{highest}" if highest is not None else "[dim]none[/dim]")
    console.print(table)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
