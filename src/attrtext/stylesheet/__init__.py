"""Style sheet module consolidating declarative rule sets and registry helpers."""

from .models import NAMED_COLORS, ColorTuple, RuleSpec, StyleSheet, normalize_color
from .manager import (
    StyleSheetManager,
    available_stylesheets,
    build_dark_stylesheet,
    build_plain_stylesheet,
    dump_stylesheet,
    load_stylesheet,
    load_stylesheet_file,
    stylesheet_manager,
)

__all__ = [
    "NAMED_COLORS",
    "ColorTuple",
    "RuleSpec",
    "StyleSheet",
    "StyleSheetManager",
    "available_stylesheets",
    "build_dark_stylesheet",
    "build_plain_stylesheet",
    "dump_stylesheet",
    "load_stylesheet",
    "load_stylesheet_file",
    "normalize_color",
    "stylesheet_manager",
]
