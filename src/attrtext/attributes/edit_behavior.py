"""Per-kind policies describing what happens to assertions when text is edited."""

from __future__ import annotations

from enum import Enum


class SpanEditAction(str, Enum):
    """Result of handling an edit that touches an assertion's span."""

    KEEP = "keep"
    """Clip or stretch the span and keep the assertion (style attributes)."""

    REMOVE = "remove"
    """Drop the assertion (spelling marks, diagnostics tied to the exact text)."""

    @classmethod
    def from_value(cls, value: "SpanEditAction | str | None") -> "SpanEditAction":
        if value is None:
            return cls.KEEP
        if isinstance(value, SpanEditAction):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown span edit action: {value!r}") from exc


def shift_for_delete(offset: int, start: int, end: int) -> int:
    """Map ``offset`` through the deletion of ``[start, end)``."""

    if offset <= start:
        return offset
    if offset >= end:
        return offset - (end - start)
    return start


__all__ = ["SpanEditAction", "shift_for_delete"]
