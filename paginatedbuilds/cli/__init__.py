"""paginatedbuilds CLI — Typer-based command-line interface.

Provides the ``paginatedbuilds`` command with subcommands for paging
through a job's build history, seeding demo data, applying retention,
and listing jobs.

All output uses Rich for formatted terminal display.
"""
