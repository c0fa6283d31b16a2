"""Overlap policies deciding the value of a kind where several assertions cover a byte."""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import reduce
from typing import Any, Callable, Sequence

from ..attributes.store import AttributeAssertion

__all__ = [
    "Combine",
    "FirstWriterWins",
    "LastWriterWins",
    "OverlapPolicy",
    "DEFAULT_POLICY",
]


class OverlapPolicy(ABC):
    """Interface for reducing the covering assertions of one kind to a single value."""

    name: str = "policy"

    @abstractmethod
    def resolve(self, covering: Sequence[AttributeAssertion]) -> Any:
        """Return the value for a non-empty ``covering`` list ordered by sequence."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LastWriterWins(OverlapPolicy):
    """The most recently inserted assertion wins, like layered style sheets."""

    name = "last_writer_wins"

    def resolve(self, covering: Sequence[AttributeAssertion]) -> Any:
        return covering[-1].value


class FirstWriterWins(OverlapPolicy):
    """The earliest inserted assertion wins; later ones only fill gaps."""

    name = "first_writer_wins"

    def resolve(self, covering: Sequence[AttributeAssertion]) -> Any:
        return covering[0].value


class Combine(OverlapPolicy):
    """Fold every covering value in sequence order with ``combinator``.

    Useful for additive kinds such as letter spacing, where nested spans
    should accumulate instead of replacing each other.
    """

    name = "combine"

    def __init__(self, combinator: Callable[[Any, Any], Any], *, initial: Any = None) -> None:
        if not callable(combinator):
            raise TypeError("Combine requires a callable combinator")
        self._combinator = combinator
        self._initial = initial

    def resolve(self, covering: Sequence[AttributeAssertion]) -> Any:
        values = [item.value for item in covering]
        if self._initial is None:
            return reduce(self._combinator, values)
        return reduce(self._combinator, values, self._initial)

    def __repr__(self) -> str:
        return f"Combine({getattr(self._combinator, '__name__', self._combinator)!s})"


DEFAULT_POLICY: OverlapPolicy = LastWriterWins()
