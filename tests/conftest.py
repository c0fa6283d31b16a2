"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from attrtext import AttributedText, Resolver, property_rule

_ENV_VARS = (
    "ATTRTEXT_SETTINGS_PATH",
    "ATTRTEXT_STYLESHEET",
    "ATTRTEXT_LOG_LEVEL",
    "ATTRTEXT_LOG_DIR",
    "ATTRTEXT_DEBUG_LOGGING",
    "ATTRTEXT_COALESCE_RUNS",
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def digits() -> AttributedText:
    """Ten single-byte characters with no resolution rules."""

    return AttributedText("0123456789")


@pytest.fixture
def weight_resolver() -> Resolver:
    resolver = Resolver()
    resolver.register_rule("weight", property_rule("font_weight", mapping={"bold": 700, "normal": 400}), "normal")
    return resolver


@pytest.fixture
def multibyte_text() -> str:
    # "a" (1 byte) + "é" (2 bytes) + "€" (3 bytes) + "b" (1 byte) -> 7 bytes
    return "aé€b"
