"""Attribute store holding ranged attribute assertions over a text buffer."""

from __future__ import annotations

import logging
from bisect import insort
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, List, Tuple

from ..core.buffer import TextBuffer
from ..core.errors import InvalidSpan, NotFound
from ..core.ranges import SpanLike, TextSpan
from .edit_behavior import SpanEditAction, shift_for_delete

__all__ = ["AttributeAssertion", "AttributeKind", "AttributeStore", "normalize_kind"]

LOGGER = logging.getLogger(__name__)

AttributeKind = str


@dataclass(slots=True, frozen=True)
class AttributeAssertion:
    """One ranged claim that ``kind`` has ``value`` over ``span``."""

    kind: AttributeKind
    span: TextSpan
    value: Any
    sequence: int

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def covers(self, offset: int) -> bool:
        return self.span.contains(offset)


def _sort_key(assertion: AttributeAssertion) -> tuple[int, int]:
    return (assertion.span.start, assertion.sequence)


def normalize_kind(kind: Any) -> AttributeKind:
    """Return ``kind`` stripped of surrounding whitespace; blank or non-string kinds raise."""

    if not isinstance(kind, str) or not kind.strip():
        raise ValueError("Attribute kind must be a non-empty string")
    return kind.strip()


class AttributeStore:
    """Per-kind ordered collections of assertions over a :class:`TextBuffer`.

    Assertions of a kind are kept sorted by ``(start, sequence)``. Overlaps are
    allowed; they are resolved by the run builder on read. Every successful
    mutation bumps :attr:`revision`, which callers use to detect stale runs.
    """

    def __init__(self, buffer: TextBuffer | str | bytes | None = None) -> None:
        self._buffer = _coerce_buffer(buffer)
        self._by_kind: Dict[AttributeKind, List[AttributeAssertion]] = {}
        self._index: Dict[int, AttributeAssertion] = {}
        self._edit_actions: Dict[AttributeKind, SpanEditAction] = {}
        self._next_sequence = 1
        self._revision = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    @property
    def length(self) -> int:
        return self._buffer.length

    @property
    def revision(self) -> int:
        """Monotonic counter bumped on every successful mutation."""

        return self._revision

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, sequence: object) -> bool:
        return sequence in self._index

    def __iter__(self) -> Iterator[AttributeAssertion]:
        """Iterate over every assertion in insertion order."""

        return iter(sorted(self._index.values(), key=lambda item: item.sequence))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def insert(self, kind: AttributeKind, span: SpanLike, value: Any) -> int:
        """Record that ``kind`` has ``value`` over ``span`` and return its sequence id."""

        kind = normalize_kind(kind)
        resolved = self._buffer.validate_span(TextSpan.from_value(span))
        sequence = self._next_sequence
        assertion = AttributeAssertion(kind=kind, span=resolved, value=value, sequence=sequence)
        self._next_sequence += 1
        insort(self._by_kind.setdefault(kind, []), assertion, key=_sort_key)
        self._index[sequence] = assertion
        self._touch()
        LOGGER.debug("Inserted %s %s=%r as #%d", resolved, kind, value, sequence)
        return sequence

    def remove(self, sequence: int) -> AttributeAssertion:
        """Delete the assertion with id ``sequence``; raise :class:`NotFound` if absent."""

        assertion = self._index.pop(sequence, None)
        if assertion is None:
            raise NotFound(message=f"No assertion with id {sequence}", sequence=sequence)
        bucket = self._by_kind[assertion.kind]
        bucket.remove(assertion)
        if not bucket:
            del self._by_kind[assertion.kind]
        self._touch()
        LOGGER.debug("Removed assertion #%d (%s)", sequence, assertion.kind)
        return assertion

    def clear(self, kind: AttributeKind) -> int:
        """Remove every assertion of ``kind`` and return how many were dropped."""

        bucket = self._by_kind.pop(normalize_kind(kind), None)
        if not bucket:
            return 0
        for assertion in bucket:
            del self._index[assertion.sequence]
        self._touch()
        LOGGER.debug("Cleared %d assertion(s) of kind %s", len(bucket), kind)
        return len(bucket)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, sequence: int) -> AttributeAssertion | None:
        return self._index.get(sequence)

    def kinds(self) -> Tuple[AttributeKind, ...]:
        """Return the kinds that currently hold assertions, in first-seen order."""

        return tuple(self._by_kind)

    def assertions(self, kind: AttributeKind | None = None) -> Tuple[AttributeAssertion, ...]:
        """Return assertions of ``kind`` sorted by start, or all of them grouped by kind."""

        if kind is not None:
            return tuple(self._by_kind.get(normalize_kind(kind), ()))
        return tuple(item for bucket in self._by_kind.values() for item in bucket)

    def attributes_at(self, offset: int) -> Tuple[AttributeAssertion, ...]:
        """Return every assertion covering byte ``offset``, unresolved, in sequence order."""

        hits = [item for bucket in self._by_kind.values() for item in bucket if item.covers(offset)]
        return tuple(sorted(hits, key=lambda item: item.sequence))

    def attributes_for_range(self, span: SpanLike) -> Tuple[AttributeAssertion, ...]:
        """Return every assertion intersecting ``span``, unresolved, in sequence order."""

        target = TextSpan.from_value(span)
        hits = [
            item
            for bucket in self._by_kind.values()
            for item in bucket
            if item.span.start < target.end and item.span.end > target.start
        ]
        return tuple(sorted(hits, key=lambda item: item.sequence))

    # ------------------------------------------------------------------
    # Edit behavior
    # ------------------------------------------------------------------
    def set_edit_action(self, kind: AttributeKind, action: SpanEditAction | str) -> None:
        self._edit_actions[normalize_kind(kind)] = SpanEditAction.from_value(action)

    def edit_action(self, kind: AttributeKind) -> SpanEditAction:
        return self._edit_actions.get(normalize_kind(kind), SpanEditAction.KEEP)

    def delete(self, span: SpanLike) -> TextBuffer:
        """Delete the bytes covered by ``span`` and remap every assertion."""

        return self.replace(span, "")

    def insert_text(self, offset: int, text: str) -> TextBuffer:
        """Insert ``text`` at ``offset`` and remap every assertion."""

        return self.replace(TextSpan(offset, offset), text)

    def replace(self, span: SpanLike, text: str) -> TextBuffer:
        """Replace the bytes covered by ``span`` with ``text``.

        Validation happens before anything changes, so a rejected edit leaves
        both the buffer and the assertions untouched.
        """

        target = self._buffer.validate_range(TextSpan.from_value(span))
        inserted = len((text or "").encode("utf-8"))
        if target.is_empty and not inserted:
            return self._buffer
        new_buffer = self._buffer.replace(target, text)

        remapped: Dict[int, AttributeAssertion] = {}
        dropped = 0
        for assertion in self._index.values():
            moved = self._remap(assertion, target, inserted)
            if moved is None:
                dropped += 1
                continue
            remapped[moved.sequence] = moved

        self._buffer = new_buffer
        self._index = remapped
        self._by_kind = {}
        for assertion in sorted(remapped.values(), key=lambda item: item.sequence):
            insort(self._by_kind.setdefault(assertion.kind, []), assertion, key=_sort_key)
        self._touch()
        LOGGER.debug(
            "Replaced %s with %d byte(s); %d assertion(s) kept, %d dropped",
            target,
            inserted,
            len(remapped),
            dropped,
        )
        return new_buffer

    def _remap(
        self,
        assertion: AttributeAssertion,
        target: TextSpan,
        inserted: int,
    ) -> AttributeAssertion | None:
        start, end = assertion.span.start, assertion.span.end
        if end <= target.start:
            return assertion
        if start >= target.end:
            shift = inserted - target.length
            if shift == 0:
                return assertion
            return replace(assertion, span=TextSpan(start + shift, end + shift))

        # The edit touches this assertion's span.
        if self.edit_action(assertion.kind) is SpanEditAction.REMOVE:
            return None
        new_start = shift_for_delete(start, target.start, target.end)
        new_end = shift_for_delete(end, target.start, target.end)
        # Replacement text is covered only by spans reaching past the edited region.
        if end > target.end:
            new_end += inserted
        if new_end <= new_start:
            return None
        return replace(assertion, span=TextSpan(new_start, new_end))

    def _touch(self) -> None:
        self._revision += 1


def _coerce_buffer(buffer: TextBuffer | str | bytes | None) -> TextBuffer:
    if buffer is None:
        return TextBuffer()
    if isinstance(buffer, TextBuffer):
        return buffer
    if isinstance(buffer, str):
        return TextBuffer.from_text(buffer)
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        return TextBuffer(bytes(buffer))
    raise TypeError(f"Cannot build a TextBuffer from {type(buffer)!r}")
