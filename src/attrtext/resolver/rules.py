"""Resolution rules mapping an attribute value to concrete style properties."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

from ..attributes.store import normalize_kind
from ..runs.builder import ABSENT

__all__ = ["ResolutionRule", "RuleFunction", "flag_rule", "property_rule"]

LOGGER = logging.getLogger(__name__)

RuleFunction = Callable[[Any], Mapping[str, Any] | None]


@dataclass(slots=True, frozen=True)
class ResolutionRule:
    """Per-kind function from a value (or ``ABSENT``) to style properties.

    Attributes:
        kind: Attribute kind the rule consumes.
        function: Callable returning a property mapping (``None`` means no properties).
        default: Value fed to ``function`` when no assertion covers a run.
        inherit_from: Kind consulted before ``default`` when this kind is absent.
    """

    kind: str
    function: RuleFunction
    default: Any = ABSENT
    inherit_from: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", normalize_kind(self.kind))
        if self.inherit_from is not None:
            object.__setattr__(self, "inherit_from", normalize_kind(self.inherit_from))
        if not callable(self.function):
            raise TypeError(f"Rule for kind '{self.kind}' must be callable")

    def apply(self, value: Any) -> Dict[str, Any]:
        """Invoke the rule and return a fresh property dictionary."""

        produced = self.function(value)
        if produced is None:
            return {}
        if not isinstance(produced, Mapping):
            raise TypeError(
                f"Rule for kind '{self.kind}' returned {type(produced).__name__}, expected a mapping"
            )
        return dict(produced)


def property_rule(
    property_name: str,
    *,
    mapping: Mapping[Any, Any] | None = None,
    transform: Callable[[Any], Any] | None = None,
) -> RuleFunction:
    """Build a rule writing one property from the value.

    ``mapping`` translates symbolic values (``"bold" -> 700``); unmapped values
    pass through. ``transform`` runs last; a value it rejects with
    ``TypeError`` or ``ValueError`` is logged and produces no property. ``ABSENT``
    produces no property either.
    """

    lookup = dict(mapping or {})

    def _rule(value: Any) -> Mapping[str, Any]:
        if value is ABSENT:
            return {}
        resolved = lookup.get(value, value) if _hashable(value) else value
        if transform is not None:
            try:
                resolved = transform(resolved)
            except (TypeError, ValueError) as exc:
                LOGGER.warning("Dropping %s: cannot convert %r (%s)", property_name, value, exc)
                return {}
        return {property_name: resolved}

    _rule.__name__ = f"property_rule[{property_name}]"
    return _rule


def flag_rule(property_name: str, on: Any, off: Any) -> RuleFunction:
    """Build a rule writing ``on`` for truthy values and ``off`` otherwise (including ``ABSENT``)."""

    def _rule(value: Any) -> Mapping[str, Any]:
        return {property_name: on if value else off}

    _rule.__name__ = f"flag_rule[{property_name}]"
    return _rule


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True
