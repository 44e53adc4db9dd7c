"""Terminal views over build history pages.

Modules
-------
renderer
    ``PageRenderer`` turns a ``Page`` into a Rich table for the CLI.
"""
