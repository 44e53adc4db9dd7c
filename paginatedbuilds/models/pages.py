"""Page request and response models.

The response models serialize to the JSON document clients consume::

    {
      "count": 2,
      "builds": [
        {"fullName": "TestJob #1", "result": "SUCCESS", "duration": 12,
         "startTimeMillis": 1700000000000, "id": "1",
         "queueTimeMillis": 1699999999990, "builtOn": ""},
        ...
      ]
    }
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from paginatedbuilds.errors import InvalidParameterError

DEFAULT_PAGE_SIZE = 10


class PageOrder(str, Enum):
    """Direction along which logical positions are counted.

    OLDEST_FIRST: position 1 is the oldest surviving build; items ascend.
    NEWEST_FIRST: position 1 is the newest surviving build; items descend.
    """

    OLDEST_FIRST = "oldest_first"
    NEWEST_FIRST = "newest_first"

    @property
    def descending(self) -> bool:
        return self is PageOrder.NEWEST_FIRST


class PageRequest(BaseModel):
    """A ``(start, size)`` window over the logical build ordering."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(default=1, ge=1)  # 1-based logical position
    size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            name = str(exc.errors()[0]["loc"][0])
            raise InvalidParameterError(name, data.get(name)) from exc

    @property
    def end(self) -> int:
        """Last logical position addressed by this request (inclusive)."""
        return self.start + self.size - 1

    @classmethod
    def parse(
        cls,
        start: Any = None,
        size: Any = None,
        *,
        default_size: int = DEFAULT_PAGE_SIZE,
    ) -> PageRequest:
        """Build a request from raw, possibly absent query values.

        Absent values take their defaults; anything else must be an
        integer ``>= 1``.

        Raises
        ------
        InvalidParameterError
            If a supplied value is not a positive integer.
        """
        return cls(
            start=_coerce("start", start, 1),
            size=_coerce("size", size, default_size),
        )


def _coerce(name: str, value: Any, default: int) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise InvalidParameterError(name, value)
    if isinstance(value, float) and not value.is_integer():
        raise InvalidParameterError(name, value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(name, value) from None


class BuildSummary(BaseModel):
    """Client-facing projection of a build record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    full_name: str = Field(alias="fullName")
    result: str | None = None
    duration: int = 0
    start_time_millis: int = Field(default=0, alias="startTimeMillis")
    id: str
    queue_time_millis: int = Field(default=0, alias="queueTimeMillis")
    built_on: str = Field(default="", alias="builtOn")


class Page(BaseModel):
    """A bounded, ordered slice of build summaries.

    ``count`` always equals ``len(items)``.  There is no "has more" flag:
    clients request the next ``start`` and stop when ``count == 0``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    count: int = 0
    items: list[BuildSummary] = Field(default_factory=list, alias="builds")

    @model_validator(mode="after")
    def _sync_count(self) -> Page:
        object.__setattr__(self, "count", len(self.items))
        return self

    @classmethod
    def empty(cls) -> Page:
        return cls()

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_json(cls, text: str | bytes) -> Page:
        return cls.model_validate_json(text)
