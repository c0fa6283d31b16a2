"""Attributed text: a buffer, its attribute store, and cached resolved runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Tuple

from .attributes.edit_behavior import SpanEditAction
from .attributes.store import AttributeAssertion, AttributeKind, AttributeStore
from .core.buffer import TextBuffer
from .core.ranges import SpanLike, TextSpan
from .resolver.resolver import Resolver, StyledRun
from .runs.builder import Run, RunBuilder
from .runs.policies import OverlapPolicy
from .stylesheet.manager import load_stylesheet
from .stylesheet.models import StyleSheet

__all__ = ["AttributedText", "TextSnapshot"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TextSnapshot:
    """Immutable view of an :class:`AttributedText` at one revision.

    Safe to share with any number of read-only consumers. It becomes stale
    (but stays internally consistent) as soon as the source text is mutated.
    """

    revision: int
    buffer: TextBuffer
    runs: Tuple[Run, ...]
    styled_runs: Tuple[StyledRun, ...]
    source_key: tuple[int, int, int] = field(default=(0, 0, 0), repr=False)

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def content_hash(self) -> str:
        return self.buffer.content_hash

    def __iter__(self) -> Iterator[StyledRun]:
        return iter(self.styled_runs)

    def __len__(self) -> int:
        return len(self.styled_runs)

    def text_for(self, run: Run | StyledRun) -> str:
        return self.buffer.slice(run.span)


class AttributedText:
    """Text plus ranged attributes, resolved lazily into styled runs.

    Mutating calls (:meth:`insert`, :meth:`remove`, :meth:`clear`, the edit
    operations, policy changes) invalidate the cached runs. Tuples returned by
    :meth:`runs` and :meth:`attribute_runs` are never mutated, but they are
    stale after any later mutation; use :meth:`snapshot` and :meth:`is_stale`
    when handing them to other consumers.
    """

    def __init__(
        self,
        text: TextBuffer | str | bytes | None = "",
        *,
        resolver: Resolver | None = None,
        builder: RunBuilder | None = None,
        coalesce: bool = False,
    ) -> None:
        self._store = AttributeStore(text)
        self._resolver = resolver if resolver is not None else Resolver()
        self._builder = builder if builder is not None else RunBuilder()
        self._coalesce = coalesce
        self._cache_key: tuple[int, int, int] | None = None
        self._runs: Tuple[Run, ...] = ()
        self._styled: Tuple[StyledRun, ...] = ()

    @classmethod
    def from_stylesheet(
        cls,
        text: TextBuffer | str | bytes | None = "",
        sheet: StyleSheet | str | None = None,
        *,
        coalesce: bool = False,
    ) -> AttributedText:
        """Build an instance whose resolver and policies come from ``sheet``."""

        resolved = load_stylesheet(sheet)
        return cls(
            text,
            resolver=resolved.build_resolver(),
            builder=resolved.build_run_builder(),
            coalesce=coalesce,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def buffer(self) -> TextBuffer:
        return self._store.buffer

    @property
    def text(self) -> str:
        return self._store.buffer.text

    @property
    def length(self) -> int:
        return self._store.length

    @property
    def revision(self) -> int:
        return self._store.revision

    @property
    def store(self) -> AttributeStore:
        return self._store

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    @property
    def builder(self) -> RunBuilder:
        return self._builder

    def __len__(self) -> int:
        return self._store.length

    def __repr__(self) -> str:
        return (
            f"AttributedText(length={self.length}, assertions={len(self._store)}, "
            f"revision={self.revision})"
        )

    # ------------------------------------------------------------------
    # Build phase
    # ------------------------------------------------------------------
    def insert(self, kind: AttributeKind, span: SpanLike, value: Any) -> int:
        return self._store.insert(kind, span, value)

    def remove(self, sequence: int) -> AttributeAssertion:
        return self._store.remove(sequence)

    def clear(self, kind: AttributeKind) -> int:
        return self._store.clear(kind)

    def set_policy(self, kind: AttributeKind, policy: OverlapPolicy) -> None:
        self._builder.set_policy(kind, policy)

    def set_edit_action(self, kind: AttributeKind, action: SpanEditAction | str) -> None:
        self._store.set_edit_action(kind, action)

    def delete(self, span: SpanLike) -> None:
        self._store.delete(span)

    def insert_text(self, offset: int, text: str) -> None:
        self._store.insert_text(offset, text)

    def replace(self, span: SpanLike, text: str) -> None:
        self._store.replace(span, text)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def attributes_at(self, offset: int) -> Tuple[AttributeAssertion, ...]:
        return self._store.attributes_at(offset)

    def attributes_for_range(self, span: SpanLike) -> Tuple[AttributeAssertion, ...]:
        return self._store.attributes_for_range(span)

    def slice(self, span: SpanLike) -> str:
        return self._store.buffer.slice(TextSpan.from_value(span))

    def attribute_runs(self) -> Tuple[Run, ...]:
        """Return the run partition (unresolved attribute values per kind)."""

        self._refresh()
        return self._runs

    def runs(self) -> Tuple[StyledRun, ...]:
        """Return styled runs in left-to-right order, covering the buffer exactly."""

        self._refresh()
        return self._styled

    def snapshot(self) -> TextSnapshot:
        self._refresh()
        return TextSnapshot(
            revision=self._store.revision,
            buffer=self._store.buffer,
            runs=self._runs,
            styled_runs=self._styled,
            source_key=self._current_key(),
        )

    def is_stale(self, snapshot: TextSnapshot) -> bool:
        """Return ``True`` if ``snapshot`` predates a mutation of this text."""

        return snapshot.source_key != self._current_key()

    def _current_key(self) -> tuple[int, int, int]:
        return (self._store.revision, self._builder.version, self._resolver.version)

    def _refresh(self) -> None:
        key = self._current_key()
        if key == self._cache_key:
            return
        runs = self._builder.build(self._store)
        styled = self._resolver.resolve_runs(runs, coalesce=self._coalesce)
        self._runs = runs
        self._styled = styled
        self._cache_key = key
        LOGGER.debug("Refreshed runs at revision %d: %d run(s), %d styled", key[0], len(runs), len(styled))
