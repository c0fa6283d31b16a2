"""Immutable UTF-8 text buffer with character boundary checks."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from .errors import InvalidSpan
from .ranges import TextSpan


def _is_continuation_byte(value: int) -> bool:
    return (value & 0xC0) == 0x80


@dataclass(slots=True, frozen=True)
class TextBuffer:
    """Immutable sequence of UTF-8 encoded bytes.

    Offsets are byte offsets. A valid boundary is ``0``, ``length``, or any
    offset whose byte is not a UTF-8 continuation byte.
    """

    data: bytes = b""
    content_hash: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise TypeError("TextBuffer data must be bytes; use TextBuffer.from_text for str")
        raw = bytes(self.data)
        raw.decode("utf-8")
        object.__setattr__(self, "data", raw)
        if not self.content_hash:
            object.__setattr__(self, "content_hash", hashlib.sha1(raw).hexdigest())

    @classmethod
    def from_text(cls, text: str) -> TextBuffer:
        """Encode ``text`` as UTF-8 and wrap it."""

        return cls((text or "").encode("utf-8"))

    def __len__(self) -> int:
        return len(self.data)

    @property
    def length(self) -> int:
        """Return the buffer length in bytes."""

        return len(self.data)

    @property
    def text(self) -> str:
        return self.data.decode("utf-8")

    def is_boundary(self, offset: int) -> bool:
        """Return ``True`` when ``offset`` is a valid character boundary."""

        if offset < 0 or offset > len(self.data):
            return False
        if offset == len(self.data):
            return True
        return not _is_continuation_byte(self.data[offset])

    def validate_span(self, span: TextSpan) -> TextSpan:
        """Return ``span`` if it is non-empty, in bounds, and character aligned."""

        if span.is_empty:
            raise InvalidSpan(
                message=f"Span [{span.start}, {span.end}) is empty",
                start=span.start,
                end=span.end,
                reason="empty",
            )
        self._check_bounds(span)
        return span

    def validate_range(self, span: TextSpan) -> TextSpan:
        """Like :meth:`validate_span` but empty spans are allowed (edit ranges)."""

        self._check_bounds(span)
        return span

    def _check_bounds(self, span: TextSpan) -> None:
        length = len(self.data)
        if span.end > length:
            raise InvalidSpan(
                message=f"Span [{span.start}, {span.end}) exceeds buffer length {length}",
                start=span.start,
                end=span.end,
                reason="out_of_bounds",
            )
        for label, offset in (("start", span.start), ("end", span.end)):
            if not self.is_boundary(offset):
                raise InvalidSpan(
                    message=f"Span {label} {offset} splits a multi-byte character",
                    start=span.start,
                    end=span.end,
                    reason="misaligned",
                )

    def slice(self, span: TextSpan) -> str:
        """Return the decoded text covered by ``span``."""

        self.validate_range(span)
        return self.data[span.start : span.end].decode("utf-8")

    def replace(self, span: TextSpan, replacement: str) -> TextBuffer:
        """Return a new buffer with ``span`` replaced by ``replacement``."""

        self.validate_range(span)
        encoded = (replacement or "").encode("utf-8")
        return TextBuffer(self.data[: span.start] + encoded + self.data[span.end :])


__all__ = ["TextBuffer"]
