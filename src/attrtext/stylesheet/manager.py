"""Style sheet registry and JSON/YAML serialization helpers."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..core.errors import StyleSheetError
from .models import RuleSpec, StyleSheet

LOGGER = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}

_WEIGHT_NAMES: Dict[str, int] = {
    "thin": 100,
    "extralight": 200,
    "light": 300,
    "normal": 400,
    "regular": 400,
    "medium": 500,
    "semibold": 600,
    "bold": 700,
    "extrabold": 800,
    "black": 900,
}

_PLAIN_RULES: List[Dict[str, Any]] = [
    {"kind": "weight", "property": "font_weight", "default": "normal", "values": _WEIGHT_NAMES, "transform": "int"},
    {"kind": "style", "property": "font_style", "default": "normal", "transform": "lower"},
    {"kind": "family", "property": "font_family", "default": "sans-serif"},
    {"kind": "size", "property": "font_size", "default": 16.0, "transform": "float"},
    {"kind": "color", "property": "color", "default": "#202124", "transform": "color"},
    {"kind": "background", "property": "background_color", "transform": "color"},
    {"kind": "underline", "property": "underline", "flag": [True, False]},
    {"kind": "strikethrough", "property": "strikethrough", "flag": [True, False]},
    {"kind": "letter_spacing", "property": "letter_spacing", "default": 0.0, "transform": "float", "policy": "sum"},
    {"kind": "language", "property": "lang", "default": "und"},
]


def build_plain_stylesheet() -> StyleSheet:
    return StyleSheet(
        name="plain",
        title="Plain",
        description="Neutral defaults for common typographic attributes.",
        rules=[RuleSpec.from_dict(item) for item in _PLAIN_RULES],
        metadata={"appearance": "light"},
    )


def build_dark_stylesheet() -> StyleSheet:
    rules = [RuleSpec.from_dict(item) for item in _PLAIN_RULES]
    for spec in rules:
        if spec.kind == "color":
            spec.default = "#ebebeb"
        elif spec.kind == "background":
            spec.default = "#1a1a1b"
    return StyleSheet(
        name="dark",
        title="Dark",
        description="Light text on a dim background.",
        rules=rules,
        metadata={"appearance": "dark"},
    )


def _yaml() -> YAML:
    parser = YAML(typ="safe")
    parser.default_flow_style = False
    parser.allow_duplicate_keys = False
    return parser


def load_stylesheet_file(source: str | Path) -> StyleSheet:
    """Read a style sheet from a ``.json``, ``.yaml`` or ``.yml`` file."""

    path = Path(source)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            payload = _yaml().load(text)
        except YAMLError as exc:
            raise StyleSheetError(message=f"Style sheet YAML is invalid: {exc}", details={"path": str(path)}) from exc
        if not isinstance(payload, Mapping):
            raise StyleSheetError(message="Style sheet file must contain a mapping", details={"path": str(path)})
        return StyleSheet.from_dict(payload)
    return StyleSheet.from_json(text)


def dump_stylesheet(sheet: StyleSheet, destination: str | Path, *, indent: int = 2) -> Path:
    """Write ``sheet`` as JSON or YAML depending on the destination suffix."""

    path = Path(destination)
    payload = sheet.to_dict()
    if path.suffix.lower() in _YAML_SUFFIXES:
        stream = io.StringIO()
        _yaml().dump(payload, stream)
        path.write_text(stream.getvalue(), encoding="utf-8")
    else:
        path.write_text(json.dumps(payload, indent=indent), encoding="utf-8")
    return path


def _sheet_key(name: str) -> str:
    return (name or "").strip().lower()


class StyleSheetManager:
    """Registry of style sheets keyed by case-insensitive name.

    Exactly one sheet is the default; :meth:`resolve` falls back to it for
    unknown names and warns once per unknown name.
    """

    def __init__(self, sheets: Iterable[StyleSheet] | None = None, *, default_name: str = "plain") -> None:
        self._sheets: Dict[str, StyleSheet] = {}
        self._unknown_names: set[str] = set()
        for sheet in sheets or ():
            self.register(sheet)
        if not self._sheets:
            self.register(build_plain_stylesheet())
        wanted = _sheet_key(default_name)
        self._default_name = wanted if wanted in self._sheets else next(iter(self._sheets))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _sheet_key(name) in self._sheets

    def __len__(self) -> int:
        return len(self._sheets)

    def register(self, sheet: StyleSheet, *, overwrite: bool = True) -> None:
        key = _sheet_key(sheet.name)
        if key in self._sheets and not overwrite:
            raise ValueError(f"Style sheet '{sheet.name}' already registered")
        self._sheets[key] = sheet
        self._unknown_names.discard(key)
        LOGGER.debug("Registered style sheet '%s' (%d rule(s))", key, len(sheet.rules))

    def unregister(self, name: str) -> StyleSheet:
        """Remove a sheet; the current default cannot be removed."""

        key = _sheet_key(name)
        if key == self._default_name:
            raise ValueError(f"Cannot remove the default style sheet '{name}'")
        try:
            return self._sheets.pop(key)
        except KeyError:
            raise KeyError(f"Unknown style sheet '{name}'") from None

    def available(self) -> List[StyleSheet]:
        return [self._sheets[key] for key in sorted(self._sheets)]

    def available_names(self) -> List[str]:
        return sorted(self._sheets)

    def resolve(self, sheet: StyleSheet | str | None = None) -> StyleSheet:
        if isinstance(sheet, StyleSheet):
            return sheet
        key = _sheet_key(sheet) if sheet else self._default_name
        found = self._sheets.get(key)
        if found is not None:
            return found
        if key not in self._unknown_names:
            self._unknown_names.add(key)
            LOGGER.warning("Unknown style sheet '%s'; falling back to '%s'", key, self._default_name)
        return self._sheets[self._default_name]

    def default(self) -> StyleSheet:
        return self._sheets[self._default_name]

    def set_default(self, sheet_name: str) -> None:
        key = _sheet_key(sheet_name)
        if key not in self._sheets:
            raise KeyError(f"Unknown style sheet '{sheet_name}'")
        self._default_name = key

    def export_stylesheet(self, sheet: StyleSheet | str | None, destination: str | Path, *, indent: int = 2) -> Path:
        return dump_stylesheet(self.resolve(sheet), destination, indent=indent)

    def import_stylesheet(self, source: str | Path, *, activate: bool = False) -> StyleSheet:
        sheet = load_stylesheet_file(source)
        self.register(sheet)
        LOGGER.debug("Imported style sheet '%s' from %s", sheet.name, source)
        if activate:
            self.set_default(sheet.name)
        return sheet
        key = (sheet or self._default_name).strip().lower()
        found = self._sheets.get(key)
        if found is None:
            LOGGER.warning("Unknown style sheet '%s'; falling back to '%s'", key, self._default_name)
            return self._sheets[self._default_name]
        return found

    def default(self) -> StyleSheet:
        return self._sheets[self._default_name]

    def set_default(self, sheet_name: str) -> None:
        key = sheet_name.strip().lower()
        if key not in self._sheets:
            raise KeyError(f"Unknown style sheet '{sheet_name}'")
        self._default_name = key

    def export_stylesheet(self, sheet: StyleSheet | str | None, destination: str | Path, *, indent: int = 2) -> Path:
        return dump_stylesheet(self.resolve(sheet), destination, indent=indent)

    def import_stylesheet(self, source: str | Path, *, activate: bool = False) -> StyleSheet:
        sheet = load_stylesheet_file(source)
        self.register(sheet)
        LOGGER.debug("Imported style sheet '%s' from %s", sheet.name, source)
        if activate:
            self.set_default(sheet.name)
        return sheet


_BUILTIN_SHEETS = [build_plain_stylesheet(), build_dark_stylesheet()]

stylesheet_manager = StyleSheetManager(_BUILTIN_SHEETS)


def load_stylesheet(sheet: StyleSheet | str | None = None) -> StyleSheet:
    return stylesheet_manager.resolve(sheet)


def available_stylesheets() -> List[str]:
    return stylesheet_manager.available_names()


__all__ = [
    "StyleSheetManager",
    "available_stylesheets",
    "build_dark_stylesheet",
    "build_plain_stylesheet",
    "dump_stylesheet",
    "load_stylesheet",
    "load_stylesheet_file",
    "stylesheet_manager",
]
