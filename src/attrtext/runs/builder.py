"""Run builder that partitions a buffer into maximal attribute-homogeneous runs."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from itertools import pairwise
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from ..attributes.store import AttributeAssertion, AttributeKind, AttributeStore
from ..core.errors import InvariantViolation
from ..core.ranges import TextSpan, collect_breakpoints, validate_partition
from .policies import DEFAULT_POLICY, OverlapPolicy

__all__ = ["ABSENT", "Run", "RunBuilder"]

LOGGER = logging.getLogger(__name__)


class _Absent:
    """Sentinel marking a kind that no assertion covers."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


@dataclass(slots=True, frozen=True)
class Run:
    """A maximal span with one resolved value (or ``ABSENT``) per kind."""

    span: TextSpan
    values: Tuple[Tuple[AttributeKind, Any], ...] = ()

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    @property
    def length(self) -> int:
        return self.span.length

    @property
    def attributes(self) -> Mapping[AttributeKind, Any]:
        """Read-only mapping of kind to resolved value, including ``ABSENT`` entries."""

        return MappingProxyType(dict(self.values))

    def value(self, kind: AttributeKind, default: Any = ABSENT) -> Any:
        for key, value in self.values:
            if key == kind:
                return default if value is ABSENT else value
        return default

    def present(self) -> Dict[AttributeKind, Any]:
        """Return only the kinds that have a value over this run."""

        return {key: value for key, value in self.values if value is not ABSENT}


def _same_values(
    left: Sequence[Tuple[AttributeKind, Any]],
    right: Sequence[Tuple[AttributeKind, Any]],
) -> bool:
    # Equal but differently typed values (1 and 1.0, 1 and True) keep separate runs.
    if len(left) != len(right):
        return False
    return all(
        left_kind == right_kind and type(left_value) is type(right_value) and left_value == right_value
        for (left_kind, left_value), (right_kind, right_value) in zip(left, right)
    )


class RunBuilder:
    """Normalizes an :class:`AttributeStore` into the canonical run partition.

    Overlapping assertions of one kind are reduced by that kind's
    :class:`OverlapPolicy`; kinds without an explicit policy use
    last-writer-wins.
    """

    def __init__(
        self,
        policies: Mapping[AttributeKind, OverlapPolicy] | None = None,
        *,
        default_policy: OverlapPolicy = DEFAULT_POLICY,
    ) -> None:
        self._policies: Dict[AttributeKind, OverlapPolicy] = dict(policies or {})
        self._default_policy = default_policy
        self._version = 0

    @property
    def version(self) -> int:
        """Counter bumped whenever a policy changes."""

        return self._version

    def set_policy(self, kind: AttributeKind, policy: OverlapPolicy) -> None:
        if not isinstance(policy, OverlapPolicy):
            raise TypeError("policy must be an OverlapPolicy instance")
        self._policies[kind] = policy
        self._version += 1

    def policy_for(self, kind: AttributeKind) -> OverlapPolicy:
        return self._policies.get(kind, self._default_policy)

    def build(self, store: AttributeStore) -> Tuple[Run, ...]:
        """Return the run partition of ``store``'s buffer."""

        started = time.perf_counter()
        length = store.length
        if length == 0:
            return ()

        kinds = store.kinds()
        everything = store.assertions()
        breakpoints = collect_breakpoints((item.span for item in everything), length)
        per_kind = {
            kind: self._sweep(store.assertions(kind), breakpoints, self.policy_for(kind))
            for kind in kinds
        }

        pending: List[List[Any]] = []
        for index, (low, high) in enumerate(pairwise(breakpoints)):
            values = tuple((kind, per_kind[kind][index]) for kind in kinds)
            if pending and _same_values(pending[-1][2], values):
                pending[-1][1] = high
                continue
            pending.append([low, high, values])

        runs = tuple(Run(span=TextSpan(low, high), values=values) for low, high, values in pending)
        self._verify(runs, length)
        LOGGER.debug(
            "Built %d run(s) from %d assertion(s) over %d byte(s) in %.3f ms",
            len(runs),
            len(everything),
            length,
            (time.perf_counter() - started) * 1000,
        )
        return runs

    def _sweep(
        self,
        assertions: Sequence[AttributeAssertion],
        breakpoints: Sequence[int],
        policy: OverlapPolicy,
    ) -> List[Any]:
        # ``assertions`` is sorted by start; every start and end is a breakpoint.
        values: List[Any] = []
        active: List[AttributeAssertion] = []
        cursor = 0
        for point in breakpoints[:-1]:
            while cursor < len(assertions) and assertions[cursor].start <= point:
                active.append(assertions[cursor])
                cursor += 1
            active = [item for item in active if item.end > point]
            if not active:
                values.append(ABSENT)
                continue
            covering = sorted(active, key=lambda item: item.sequence)
            values.append(policy.resolve(covering))
        return values

    def _verify(self, runs: Sequence[Run], length: int) -> None:
        try:
            validate_partition([run.span for run in runs], length)
            for index, (left, right) in enumerate(pairwise(runs)):
                if _same_values(left.values, right.values):
                    raise InvariantViolation(
                        message=f"Runs {index} and {index + 1} carry identical attributes",
                        details={"index": index, "offset": right.start, "fault": "unmerged"},
                    )
        except InvariantViolation as exc:
            LOGGER.error("Run partition invariant violated: %s", exc.to_dict())
            raise
