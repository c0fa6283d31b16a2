"""Data structures describing declarative style sheets."""

from __future__ import annotations

import json
import operator
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from ..core.errors import StyleSheetError
from ..resolver.resolver import Resolver
from ..resolver.rules import ResolutionRule, flag_rule, property_rule
from ..runs.builder import ABSENT, RunBuilder
from ..runs.policies import Combine, FirstWriterWins, LastWriterWins, OverlapPolicy

ColorTuple = Tuple[int, int, int]

NAMED_COLORS: Dict[str, ColorTuple] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "silver": (192, 192, 192),
    "red": (255, 0, 0),
    "maroon": (128, 0, 0),
    "orange": (255, 165, 0),
    "yellow": (255, 255, 0),
    "olive": (128, 128, 0),
    "lime": (0, 255, 0),
    "green": (0, 128, 0),
    "teal": (0, 128, 128),
    "cyan": (0, 255, 255),
    "aqua": (0, 255, 255),
    "blue": (0, 0, 255),
    "navy": (0, 0, 128),
    "purple": (128, 0, 128),
    "magenta": (255, 0, 255),
    "fuchsia": (255, 0, 255),
    "pink": (255, 192, 203),
    "brown": (165, 42, 42),
}

_HEX_COLOR = re.compile(r"#?(?P<digits>[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")
_RGB_FUNCTION = re.compile(r"rgb\((?P<body>[^)]*)\)", re.IGNORECASE)


def _channels(components: Sequence[Any], original: Any) -> ColorTuple:
    if len(components) != 3:
        raise ValueError(f"Color {original!r} needs exactly 3 channels")
    channels = []
    for component in components:
        number = int(component)
        channels.append(min(255, max(0, number)))
    return (channels[0], channels[1], channels[2])


def normalize_color(value: Any) -> ColorTuple:
    """Convert ``value`` into an RGB tuple.

    Accepts named colors (``"red"``), hex (``"#rgb"``/``"#rrggbb"``), the
    ``rgb(r, g, b)`` form, bare ``"r, g, b"`` strings and 3-item sequences.
    Channels outside 0-255 are clamped.
    """

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Color strings cannot be empty")
        named = NAMED_COLORS.get(text.lower())
        if named is not None:
            return named
        function = _RGB_FUNCTION.fullmatch(text)
        if function is not None:
            text = function.group("body")
        if "," in text:
            return _channels([part.strip() for part in text.split(",")], value)
        match = _HEX_COLOR.fullmatch(text)
        if match is None:
            raise ValueError(f"Unsupported color format: {value!r}")
        digits = match.group("digits")
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    if isinstance(value, Sequence):
        return _channels(list(value), value)

    raise TypeError(f"Cannot convert {type(value)!r} to an RGB color")


_TRANSFORMS: Dict[str, Callable[[Any], Any]] = {
    "color": normalize_color,
    "float": float,
    "int": int,
    "str": str,
    "lower": lambda value: str(value).strip().lower(),
}

_POLICIES: Dict[str, Callable[[], OverlapPolicy]] = {
    "last_writer_wins": LastWriterWins,
    "first_writer_wins": FirstWriterWins,
    "sum": lambda: Combine(operator.add),
    "max": lambda: Combine(max),
    "min": lambda: Combine(min),
}


@dataclass(slots=True)
class RuleSpec:
    """Declarative description of one resolution rule."""

    kind: str
    property_name: str
    default: Any = None
    values: Dict[str, Any] = field(default_factory=dict)
    transform: str | None = None
    flag: Tuple[Any, Any] | None = None
    inherit_from: str | None = None
    policy: str | None = None

    def __post_init__(self) -> None:
        self.kind = (self.kind or "").strip()
        self.property_name = (self.property_name or "").strip()
        if not self.kind or not self.property_name:
            raise StyleSheetError(message="Rules require non-empty 'kind' and 'property'")
        if self.transform is not None and self.transform not in _TRANSFORMS:
            raise StyleSheetError(
                message=f"Unknown transform '{self.transform}' for kind '{self.kind}'",
                details={"kind": self.kind, "transform": self.transform},
            )
        if self.policy is not None and self.policy not in _POLICIES:
            raise StyleSheetError(
                message=f"Unknown overlap policy '{self.policy}' for kind '{self.kind}'",
                details={"kind": self.kind, "policy": self.policy},
            )
        if self.flag is not None:
            pair = list(self.flag)
            if len(pair) != 2:
                raise StyleSheetError(message=f"Flag for kind '{self.kind}' needs exactly [on, off]")
            self.flag = (pair[0], pair[1])
        self.values = dict(self.values or {})
        self.inherit_from = (self.inherit_from or "").strip() or None

    def to_rule(self) -> ResolutionRule:
        if self.flag is not None:
            function = flag_rule(self.property_name, *self.flag)
        else:
            function = property_rule(
                self.property_name,
                mapping=self.values,
                transform=_TRANSFORMS.get(self.transform) if self.transform else None,
            )
        default = ABSENT if self.default is None else self.default
        return ResolutionRule(kind=self.kind, function=function, default=default, inherit_from=self.inherit_from)

    def to_policy(self) -> OverlapPolicy | None:
        if self.policy is None:
            return None
        return _POLICIES[self.policy]()

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"kind": self.kind, "property": self.property_name}
        if self.default is not None:
            payload["default"] = self.default
        if self.values:
            payload["values"] = dict(self.values)
        if self.transform:
            payload["transform"] = self.transform
        if self.flag is not None:
            payload["flag"] = list(self.flag)
        if self.inherit_from:
            payload["inherit_from"] = self.inherit_from
        if self.policy:
            payload["policy"] = self.policy
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RuleSpec":
        if not isinstance(payload, Mapping):
            raise StyleSheetError(message="Each rule must be an object")
        if "kind" not in payload or "property" not in payload:
            raise StyleSheetError(message="Rule payload missing 'kind' or 'property'", details=dict(payload))
        return cls(
            kind=str(payload["kind"]),
            property_name=str(payload["property"]),
            default=payload.get("default"),
            values=dict(payload.get("values") or {}),
            transform=payload.get("transform"),
            flag=payload.get("flag"),
            inherit_from=payload.get("inherit_from"),
            policy=payload.get("policy"),
        )


@dataclass(slots=True)
class StyleSheet:
    """Serializable, ordered set of rules; order is property precedence."""

    name: str
    title: str
    rules: List[RuleSpec] = field(default_factory=list)
    description: str | None = None
    version: str = "1.0.0"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.name = (self.name or "default").strip().lower() or "default"
        self.title = (self.title or self.name.title()).strip()
        self.rules = [rule if isinstance(rule, RuleSpec) else RuleSpec.from_dict(rule) for rule in self.rules]
        self.metadata = dict(self.metadata or {})

    def rule(self, kind: str) -> RuleSpec:
        for spec in self.rules:
            if spec.kind == kind:
                return spec
        raise KeyError(f"Style sheet '{self.name}' has no rule for kind '{kind}'")

    def build_resolver(self, *, freeze: bool = True) -> Resolver:
        """Return a :class:`Resolver` with the rules registered in sheet order."""

        resolver = Resolver(spec.to_rule() for spec in self.rules)
        return resolver.freeze() if freeze else resolver

    def build_run_builder(self) -> RunBuilder:
        """Return a :class:`RunBuilder` carrying the sheet's per-kind overlap policies."""

        policies = {spec.kind: policy for spec in self.rules if (policy := spec.to_policy()) is not None}
        return RunBuilder(policies)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "version": self.version,
            "metadata": dict(self.metadata),
            "rules": [spec.to_dict() for spec in self.rules],
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StyleSheet":
        if not isinstance(payload, Mapping):
            raise StyleSheetError(message="Style sheet root must be an object")
        if "name" not in payload:
            raise StyleSheetError(message="Style sheet payload missing 'name'")
        rules = payload.get("rules") or []
        if not isinstance(rules, list):
            raise StyleSheetError(message="Style sheet 'rules' must be a list")
        description = payload.get("description")
        return cls(
            name=str(payload["name"]),
            title=str(payload.get("title") or payload["name"]),
            rules=[RuleSpec.from_dict(item) for item in rules],
            description=str(description) if description is not None else None,
            version=str(payload.get("version") or "1.0.0"),
            metadata=dict(payload.get("metadata") or {}),
        )

    @classmethod
    def from_json(cls, text: str) -> "StyleSheet":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StyleSheetError(message=f"Style sheet JSON is invalid: {exc}") from exc
        return cls.from_dict(data)


__all__ = ["NAMED_COLORS", "ColorTuple", "RuleSpec", "StyleSheet", "normalize_color"]
