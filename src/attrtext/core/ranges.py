"""Structured helpers for representing byte spans and interval partitions."""

from __future__ import annotations

import operator
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator

from .errors import InvalidSpan, InvariantViolation


@dataclass(slots=True, frozen=True)
class TextSpan(Sequence[int]):
    """Half-open byte interval ``[start, end)`` over a text buffer."""

    start: int
    end: int

    def __post_init__(self) -> None:
        start = self._coerce_index(self.start, "start")
        end = self._coerce_index(self.end, "end")
        if end < start:
            raise InvalidSpan(
                message=f"TextSpan end {end} precedes start {start}",
                start=start,
                end=end,
                reason="reversed",
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @staticmethod
    def _coerce_index(value: Any, label: str) -> int:
        # Offsets are exact byte positions; floats and numeric strings are not truncated.
        if isinstance(value, bool):
            raise InvalidSpan(message=f"TextSpan {label} must be an integer", reason="type")
        try:
            number = operator.index(value)
        except TypeError as exc:
            raise InvalidSpan(
                message=f"TextSpan {label} must be an integer, got {type(value).__name__}",
                reason="type",
            ) from exc
        if number < 0:
            raise InvalidSpan(message=f"TextSpan {label} must not be negative", reason="negative")
        return number

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int | slice) -> int | tuple[int, ...]:
        if isinstance(index, slice):
            return self.to_tuple()[index]
        if index == 0:
            return self.start
        if index == 1:
            return self.end
        raise IndexError("TextSpan index out of range")

    def __iter__(self) -> Iterator[int]:
        yield self.start
        yield self.end

    def __repr__(self) -> str:
        return f"TextSpan({self.start}, {self.end})"

    @property
    def length(self) -> int:
        """Return the width of the span in bytes."""

        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when the span covers no bytes."""

        return self.start == self.end

    def contains(self, offset: int) -> bool:
        """Return ``True`` when ``offset`` lies inside ``[start, end)``."""

        return self.start <= offset < self.end

    def covers(self, other: TextSpan) -> bool:
        """Return ``True`` when ``other`` lies entirely inside this span."""

        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: TextSpan) -> bool:
        """Return ``True`` when the spans share at least one byte."""

        return self.start < other.end and other.start < self.end

    def abuts(self, other: TextSpan) -> bool:
        """Return ``True`` when one span ends exactly where the other starts."""

        return self.end == other.start or other.end == self.start

    def intersection(self, other: TextSpan) -> TextSpan | None:
        """Return the shared region, or ``None`` when the spans do not overlap."""

        if not self.overlaps(other):
            return None
        return TextSpan(max(self.start, other.start), min(self.end, other.end))

    def to_tuple(self) -> tuple[int, int]:
        """Return the span as a ``(start, end)`` tuple."""

        return (self.start, self.end)

    def to_dict(self) -> dict[str, int]:
        """Return the span as a JSON-friendly object."""

        return {"start": self.start, "end": self.end}

    @classmethod
    def from_value(cls, value: Any) -> TextSpan:
        """Coerce ``value`` into a :class:`TextSpan`."""

        if isinstance(value, TextSpan):
            return value
        if value is None:
            raise InvalidSpan(message="TextSpan value is required", reason="missing")
        if isinstance(value, range):
            if value.step != 1:
                raise InvalidSpan(message="TextSpan ranges must use a step of 1", reason="step")
            return cls(value.start, value.stop)
        if isinstance(value, Mapping):
            start = value.get("start")
            end = value.get("end")
            if start is None or end is None:
                raise InvalidSpan(message="TextSpan mappings require start and end keys", reason="missing")
            return cls(start, end)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            seq = list(value)
            if len(seq) != 2:
                raise InvalidSpan(message="TextSpan sequences must have exactly two entries", reason="shape")
            return cls(seq[0], seq[1])
        start = getattr(value, "start", None)
        end = getattr(value, "end", None)
        if start is not None and end is not None:
            return cls(start, end)
        raise TypeError("Unsupported TextSpan input")


SpanLike = TextSpan | tuple[int, int] | range | Mapping[str, int]


def collect_breakpoints(spans: Iterable[TextSpan], length: int) -> list[int]:
    """Return the sorted distinct boundary offsets of ``spans`` plus ``0`` and ``length``."""

    points = {0, length}
    for span in spans:
        points.add(span.start)
        points.add(span.end)
    return sorted(points)


def validate_partition(spans: Sequence[TextSpan], length: int) -> None:
    """Raise :class:`InvariantViolation` unless ``spans`` exactly tile ``[0, length)``."""

    if length == 0:
        if spans:
            raise InvariantViolation(
                message="Empty buffer must not produce runs",
                details={"run_count": len(spans)},
            )
        return
    cursor = 0
    for index, span in enumerate(spans):
        if span.start != cursor:
            kind = "gap" if span.start > cursor else "overlap"
            raise InvariantViolation(
                message=f"Run {index} starts at {span.start}, expected {cursor} ({kind})",
                details={"index": index, "expected": cursor, "actual": span.start, "fault": kind},
            )
        if span.is_empty:
            raise InvariantViolation(
                message=f"Run {index} is empty",
                details={"index": index, "offset": span.start, "fault": "empty"},
            )
        cursor = span.end
    if cursor != length:
        raise InvariantViolation(
            message=f"Runs end at {cursor}, expected buffer length {length}",
            details={"expected": length, "actual": cursor, "fault": "coverage"},
        )


__all__ = ["SpanLike", "TextSpan", "collect_breakpoints", "validate_partition"]
