"""Exceptions raised by paginatedbuilds."""

from __future__ import annotations

from typing import Any


class InvalidParameterError(ValueError):
    """A client-supplied parameter is out of range or malformed.

    Surfaced to callers as a client error; never retried.
    """

    def __init__(self, name: str, value: Any, reason: str = "") -> None:
        self.name = name
        self.value = value
        self.reason = reason or "must be a positive integer"
        super().__init__(f"Invalid {name}={value!r}: {self.reason}")


class DuplicateBuildError(ValueError):
    """A build number was reused or is not beyond the highest allocated one."""
