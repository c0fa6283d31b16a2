"""Unit tests for the style sheet module."""

from __future__ import annotations

from pathlib import Path

import pytest

from attrtext.core.errors import ResolverFrozen, StyleSheetError
from attrtext.runs import ABSENT, Combine
from attrtext.stylesheet import (
    RuleSpec,
    StyleSheet,
    StyleSheetManager,
    build_dark_stylesheet,
    build_plain_stylesheet,
    load_stylesheet_file,
    normalize_color,
)


def _custom_sheet() -> StyleSheet:
    return StyleSheet(
        name="Custom",
        title="Custom",
        rules=[
            {"kind": "weight", "property": "font_weight", "default": "normal", "values": {"bold": 700, "normal": 400}},
            {"kind": "highlight", "property": "background_color", "transform": "color", "inherit_from": "mark"},
            {"kind": "spacing", "property": "letter_spacing", "transform": "float", "policy": "max"},
        ],
        metadata={"author": "tests"},
    )


def test_stylesheet_serialization_round_trip() -> None:
    original = _custom_sheet()

    payload = original.to_dict()
    assert payload["name"] == "custom"
    assert payload["rules"][0]["property"] == "font_weight"
    assert "default" not in payload["rules"][1]

    restored = StyleSheet.from_json(original.to_json())
    assert restored == original
    assert restored.rule("highlight").inherit_from == "mark"


def test_stylesheet_builds_frozen_resolver_and_policies() -> None:
    sheet = _custom_sheet()

    resolver = sheet.build_resolver()
    builder = sheet.build_run_builder()

    assert resolver.frozen
    assert resolver.kinds() == ("weight", "highlight", "spacing")
    assert isinstance(builder.policy_for("spacing"), Combine)
    with pytest.raises(ResolverFrozen):
        resolver.register_rule("extra", lambda value: {})
    assert not sheet.build_resolver(freeze=False).frozen


def test_rule_spec_without_default_maps_to_absent() -> None:
    spec = RuleSpec(kind="highlight", property_name="background_color", transform="color")

    rule = spec.to_rule()

    assert rule.default is ABSENT
    assert rule.apply(ABSENT) == {}
    assert rule.apply("#fff") == {"background_color": (255, 255, 255)}


def test_flag_rule_spec() -> None:
    rule = RuleSpec(kind="underline", property_name="underline", flag=["single", "none"]).to_rule()

    assert rule.apply(True) == {"underline": "single"}
    assert rule.apply(ABSENT) == {"underline": "none"}


@pytest.mark.parametrize(
    "payload",
    [
        {"kind": "weight"},
        {"kind": "", "property": "font_weight"},
        {"kind": "weight", "property": "font_weight", "transform": "uppercase"},
        {"kind": "weight", "property": "font_weight", "policy": "average"},
        {"kind": "underline", "property": "underline", "flag": [True]},
        ["weight", "font_weight"],
    ],
)
def test_invalid_rule_payloads_raise(payload) -> None:
    with pytest.raises(StyleSheetError):
        RuleSpec.from_dict(payload)


def test_invalid_stylesheet_json_raises() -> None:
    with pytest.raises(StyleSheetError):
        StyleSheet.from_json("{not json")
    with pytest.raises(StyleSheetError):
        StyleSheet.from_json('{"title": "no name"}')
    with pytest.raises(StyleSheetError):
        StyleSheet.from_json('{"name": "x", "rules": {"kind": "weight"}}')


def test_stylesheet_manager_resolve_and_list() -> None:
    manager = StyleSheetManager([build_plain_stylesheet()])
    custom = _custom_sheet()
    manager.register(custom)

    assert manager.resolve("CUSTOM") is custom
    assert manager.resolve(custom) is custom
    assert manager.available_names() == ["custom", "plain"]
    assert manager.resolve("missing").name == "plain"
    with pytest.raises(ValueError):
        manager.register(_custom_sheet(), overwrite=False)
    with pytest.raises(KeyError):
        manager.set_default("missing")


def test_stylesheet_manager_export_and_import_json(tmp_path: Path) -> None:
    manager = StyleSheetManager([_custom_sheet()], default_name="custom")
    export_path = tmp_path / "sheet.json"

    manager.export_stylesheet("custom", export_path)

    other_manager = StyleSheetManager([build_plain_stylesheet()])
    imported = other_manager.import_stylesheet(export_path, activate=True)

    assert imported == _custom_sheet()
    assert other_manager.default() is imported


def test_stylesheet_manager_export_and_import_yaml(tmp_path: Path) -> None:
    manager = StyleSheetManager([build_plain_stylesheet()])
    export_path = manager.export_stylesheet("plain", tmp_path / "plain.yaml")

    assert "font_weight" in export_path.read_text(encoding="utf-8")
    assert load_stylesheet_file(export_path) == build_plain_stylesheet()


def test_hand_written_yaml_stylesheet(tmp_path: Path) -> None:
    path = tmp_path / "notes.yml"
    path.write_text(
        "name: notes\n"
        "title: Notes\n"
        "rules:\n"
        "  - kind: emphasis\n"
        "    property: font_style\n"
        "    flag: [italic, normal]\n"
        "  - kind: size\n"
        "    property: font_size\n"
        "    default: 14\n"
        "    transform: float\n",
        encoding="utf-8",
    )

    sheet = load_stylesheet_file(path)

    assert [spec.kind for spec in sheet.rules] == ["emphasis", "size"]
    assert sheet.rule("size").to_rule().apply(14) == {"font_size": 14.0}


def test_malformed_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("name: [unterminated\n", encoding="utf-8")
    with pytest.raises(StyleSheetError):
        load_stylesheet_file(path)

    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(StyleSheetError):
        load_stylesheet_file(path)


def test_dark_stylesheet_overrides_colors() -> None:
    sheet = build_dark_stylesheet()

    assert sheet.rule("color").default == "#ebebeb"
    assert sheet.rule("background").default == "#1a1a1b"
    assert build_plain_stylesheet().rule("color").default == "#202124"
    with pytest.raises(KeyError):
        sheet.rule("missing")


def test_normalize_color_accepts_common_formats() -> None:
    assert normalize_color("#abc") == (170, 187, 204)
    assert normalize_color("10, 20, 300") == (10, 20, 255)
    assert normalize_color([1, 2, 3]) == (1, 2, 3)
    with pytest.raises(ValueError):
        normalize_color("#abcd")


def test_normalize_color_accepts_names_and_rgb_notation() -> None:
    assert normalize_color("Red") == (255, 0, 0)
    assert normalize_color(" navy ") == (0, 0, 128)
    assert normalize_color("rgb(12, 34, 56)") == (12, 34, 56)
    assert normalize_color("ABCDEF") == (171, 205, 239)
    with pytest.raises(ValueError):
        normalize_color("rr")
    with pytest.raises(ValueError):
        normalize_color("rgb(1, 2)")
    with pytest.raises(TypeError):
        normalize_color(12)


def test_plain_stylesheet_maps_css_weight_names() -> None:
    rule = build_plain_stylesheet().rule("weight").to_rule()

    assert rule.apply("semibold") == {"font_weight": 600}
    assert rule.apply("thin") == {"font_weight": 100}
    assert rule.apply(650) == {"font_weight": 650}
    assert rule.apply("heavy-ish") == {}


def test_stylesheet_manager_membership_and_unregister() -> None:
    manager = StyleSheetManager([build_plain_stylesheet(), _custom_sheet()])

    assert "Custom" in manager
    assert len(manager) == 2
    assert manager.unregister("custom").name == "custom"
    assert "custom" not in manager
    with pytest.raises(ValueError):
        manager.unregister("plain")
    with pytest.raises(KeyError):
        manager.unregister("custom")
