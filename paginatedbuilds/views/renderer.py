"""Rich terminal renderer for build history pages.

Color scheme
------------
- green     : SUCCESS
- yellow    : UNSTABLE
- red       : FAILURE
- dim       : NOT_BUILT, ABORTED
- cyan      : running (no result yet)
"""

from __future__ import annotations

from datetime import datetime, timezone

from rich.console import Console
from rich.table import Table

from paginatedbuilds.models.builds import BuildResult, JobRef
from paginatedbuilds.models.pages import Page, PageOrder, PageRequest

_RESULT_STYLES: dict[str, str] = {
    BuildResult.SUCCESS.value: "bold green",
    BuildResult.UNSTABLE.value: "bold yellow",
    BuildResult.FAILURE.value: "bold red",
    BuildResult.NOT_BUILT.value: "dim",
    BuildResult.ABORTED.value: "dim",
}


def _format_duration(millis: int) -> str:
    seconds, ms = divmod(millis, 1000)
    minutes, seconds = divmod(seconds, 60)
    if minutes:
        return f"{minutes}m {seconds}s"
    if seconds:
        return f"{seconds}.{ms // 100}s"
    return f"{ms}ms"


def _format_timestamp(millis: int) -> str:
    if millis <= 0:
        return "-"
    moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S")


class PageRenderer:
    """Renders a ``Page`` as a Rich table.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_page(
        self,
        job: JobRef,
        page: Page,
        request: PageRequest,
        order: PageOrder,
    ) -> Table:
        """Build the table for one page; positions start at ``request.start``."""
        direction = "newest first" if order.descending else "oldest first"
        table = Table(
            title=f"{job.name} builds {request.start}-{request.end} ({direction})",
            caption=f"{page.count} build(s)",
            show_lines=False,
        )
        table.add_column("#", justify="right", style="dim")
        table.add_column("Build", style="cyan", no_wrap=True)
        table.add_column("Result")
        table.add_column("Started (UTC)", no_wrap=True)
        table.add_column("Duration", justify="right")
        table.add_column("Built on")

        for position, summary in enumerate(page.items, start=request.start):
            if summary.result is None:
                result = "[cyan]RUNNING[/cyan]"
            else:
                style = _RESULT_STYLES.get(summary.result, "")
                result = f"[{style}]{summary.result}[/{style}]" if style else summary.result
            table.add_row(
                str(position),
                summary.full_name,
                result,
                _format_timestamp(summary.start_time_millis),
                _format_duration(summary.duration),
                summary.built_on or "(controller)",
            )
        return table

    def print_page(
        self,
        job: JobRef,
        page: Page,
        request: PageRequest,
        order: PageOrder,
    ) -> None:
        if not page.count:
            self.console.print(
                f"[dim]No builds at position {request.start} for {job.name}.[/dim]"
            )
            return
        self.console.print(self.render_page(job, page, request, order))
