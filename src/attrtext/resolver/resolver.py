"""Resolver turning runs' attribute sets into styled runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from ..core.errors import ResolverFrozen
from ..core.ranges import TextSpan
from ..runs.builder import ABSENT, Run
from .rules import ResolutionRule, RuleFunction

__all__ = ["Resolver", "StyledRun"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StyledRun:
    """A span plus the concrete style properties that apply across it."""

    span: TextSpan
    items: Tuple[Tuple[str, Any], ...] = ()

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    @property
    def properties(self) -> Mapping[str, Any]:
        return MappingProxyType(dict(self.items))

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self.items:
            if key == name:
                return value
        return default


class Resolver:
    """Ordered registry of resolution rules.

    Registration order is precedence order: when two rules write the same
    property, the later-registered rule wins. Re-registering a kind replaces
    its rule in place, keeping the original position. Kinds without a rule
    are ignored, so callers may store bookkeeping-only attributes.
    """

    def __init__(self, rules: Iterable[ResolutionRule] | None = None) -> None:
        self._rules: Dict[str, ResolutionRule] = {}
        self._frozen = False
        self._version = 0
        for rule in rules or ():
            self.add(rule)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def version(self) -> int:
        """Counter bumped whenever the rule set changes."""

        return self._version

    def freeze(self) -> "Resolver":
        """Reject further registrations; returns ``self`` for chaining."""

        self._frozen = True
        return self

    def register_rule(
        self,
        kind: str,
        rule: RuleFunction,
        default: Any = ABSENT,
        *,
        inherit_from: str | None = None,
    ) -> ResolutionRule:
        """Register ``rule`` for ``kind`` with ``default`` used when the kind is absent."""

        return self.add(ResolutionRule(kind=kind, function=rule, default=default, inherit_from=inherit_from))

    def add(self, rule: ResolutionRule) -> ResolutionRule:
        if self._frozen:
            raise ResolverFrozen(message=f"Cannot register rule for '{rule.kind}' after freeze", kind=rule.kind)
        replaced = rule.kind in self._rules
        self._rules[rule.kind] = rule
        self._version += 1
        LOGGER.debug("%s resolution rule for kind %s", "Replaced" if replaced else "Registered", rule.kind)
        return rule

    def rules(self) -> Tuple[ResolutionRule, ...]:
        return tuple(self._rules.values())

    def kinds(self) -> Tuple[str, ...]:
        return tuple(self._rules)

    def __contains__(self, kind: object) -> bool:
        return kind in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def resolve(self, run: Run) -> StyledRun:
        """Map ``run``'s attribute set to a :class:`StyledRun`."""

        properties: Dict[str, Any] = {}
        for rule in self._rules.values():
            value = run.value(rule.kind)
            if value is ABSENT and rule.inherit_from:
                value = run.value(rule.inherit_from)
            if value is ABSENT:
                value = rule.default
            properties.update(rule.apply(value))
        return StyledRun(span=run.span, items=tuple(properties.items()))

    def resolve_runs(self, runs: Sequence[Run], *, coalesce: bool = False) -> Tuple[StyledRun, ...]:
        """Resolve every run in order.

        With ``coalesce`` adjacent styled runs with equal properties are merged;
        this happens when runs differ only in kinds no rule consumes.
        """

        styled = [self.resolve(run) for run in runs]
        if not coalesce or len(styled) < 2:
            return tuple(styled)
        merged: List[StyledRun] = [styled[0]]
        for current in styled[1:]:
            previous = merged[-1]
            if dict(previous.items) == dict(current.items) and previous.end == current.start:
                merged[-1] = StyledRun(span=TextSpan(previous.start, current.end), items=previous.items)
            else:
                merged.append(current)
        return tuple(merged)
