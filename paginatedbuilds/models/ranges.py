"""NumberRange — a compact set of build numbers as closed intervals.

The textual form mirrors the one build tools use on the wire::

    "1-8,12"      -> builds 1..8 and 12
    "5"           -> build 5 only

Intervals are always normalized: disjoint, sorted ascending, with
overlapping or adjacent intervals merged.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from paginatedbuilds.errors import InvalidParameterError


class NumberRange(BaseModel):
    """An immutable set of positive build numbers."""

    model_config = ConfigDict(frozen=True)

    intervals: tuple[tuple[int, int], ...] = ()

    @field_validator("intervals")
    @classmethod
    def _normalize(
        cls, value: tuple[tuple[int, int], ...]
    ) -> tuple[tuple[int, int], ...]:
        merged: list[tuple[int, int]] = []
        for lower, upper in sorted(value):
            if lower < 1 or upper < lower:
                raise ValueError(f"invalid interval {lower}-{upper}")
            if merged and lower <= merged[-1][1] + 1:
                merged[-1] = (merged[-1][0], max(merged[-1][1], upper))
            else:
                merged.append((lower, upper))
        return tuple(merged)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def between(cls, lower: int, upper: int) -> NumberRange:
        """Closed interval ``[lower, upper]`` clipped to ``>= 1``.

        Returns an empty range when nothing is left after clipping.
        """
        lower = max(lower, 1)
        if upper < lower:
            return cls()
        return cls(intervals=((lower, upper),))

    @classmethod
    def of(cls, numbers: Iterable[int]) -> NumberRange:
        """Range holding exactly the given numbers."""
        return cls(intervals=tuple((n, n) for n in numbers))

    @classmethod
    def from_string(cls, text: str) -> NumberRange:
        """Parse ``"1-8,12"``-style text.

        Raises
        ------
        InvalidParameterError
            If the text is empty or any part is not ``N`` or ``N-M``
            with ``1 <= N <= M``.
        """
        parts = [p.strip() for p in text.split(",") if p.strip()]
        if not parts:
            raise InvalidParameterError("range", text, "must name at least one build")

        intervals: list[tuple[int, int]] = []
        for part in parts:
            lower_text, sep, upper_text = part.partition("-")
            try:
                lower = int(lower_text)
                upper = int(upper_text) if sep else lower
            except ValueError:
                raise InvalidParameterError(
                    "range", text, f"cannot parse {part!r}"
                ) from None
            intervals.append((lower, upper))

        try:
            return cls(intervals=tuple(intervals))
        except ValidationError as exc:
            raise InvalidParameterError(
                "range", text, "intervals must satisfy 1 <= start <= end"
            ) from exc

    # ------------------------------------------------------------------
    # Set behaviour
    # ------------------------------------------------------------------

    @property
    def lower(self) -> int | None:
        return self.intervals[0][0] if self.intervals else None

    @property
    def upper(self) -> int | None:
        return self.intervals[-1][1] if self.intervals else None

    def __len__(self) -> int:
        return sum(upper - lower + 1 for lower, upper in self.intervals)

    def __contains__(self, number: object) -> bool:
        if not isinstance(number, int):
            return False
        return any(lower <= number <= upper for lower, upper in self.intervals)

    def __str__(self) -> str:
        return ",".join(
            str(lower) if lower == upper else f"{lower}-{upper}"
            for lower, upper in self.intervals
        )

    def ascending(self) -> Iterator[int]:
        for lower, upper in self.intervals:
            yield from range(lower, upper + 1)

    def descending(self) -> Iterator[int]:
        for lower, upper in reversed(self.intervals):
            yield from range(upper, lower - 1, -1)

    def union(self, other: NumberRange) -> NumberRange:
        return NumberRange(intervals=self.intervals + other.intervals)

    def clip(self, lower: int, upper: int) -> NumberRange:
        """Restrict the range to ``[lower, upper]``."""
        kept = tuple(
            (max(lo, lower), min(hi, upper))
            for lo, hi in self.intervals
            if hi >= lower and lo <= upper
        )
        return NumberRange(intervals=kept)
