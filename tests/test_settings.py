"""Tests for the settings persistence layer."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from attrtext.services.settings import EngineSettings, SettingsStore, resolve_log_level


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")

    assert store.load() == EngineSettings()


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    original = EngineSettings(
        stylesheet="dark",
        stylesheet_paths=["~/sheets/notes.yaml"],
        coalesce_styled_runs=True,
        log_level="WARNING",
        metadata={"env": "dev"},
    )

    SettingsStore(path).save(original)
    payload = json.loads(path.read_text(encoding="utf-8"))
    reloaded = SettingsStore(path).load()

    assert payload["version"] == 1
    assert not path.with_suffix(".tmp").exists()
    assert reloaded == original


def test_unknown_keys_and_invalid_payloads_fall_back(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"stylesheet": "dark", "theme": "solarized", "version": 1}), encoding="utf-8")

    assert SettingsStore(path).load().stylesheet == "dark"

    path.write_text("{broken", encoding="utf-8")
    assert SettingsStore(path).load() == EngineSettings()

    path.write_text(json.dumps(["not", "an", "object"]), encoding="utf-8")
    assert SettingsStore(path).load() == EngineSettings()


def test_cli_overrides_merge_metadata(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(EngineSettings(metadata={"env": "dev", "owner": "docs"}))

    loaded = SettingsStore(path).load(
        overrides={"stylesheet": "dark", "metadata": {"env": "ci"}, "log_level": None, "bogus": 1}
    )

    assert loaded.stylesheet == "dark"
    assert loaded.log_level == "INFO"
    assert loaded.metadata == {"env": "ci", "owner": "docs"}


def test_env_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(EngineSettings(stylesheet="plain", log_level="INFO"))
    monkeypatch.setenv("ATTRTEXT_STYLESHEET", "dark")
    monkeypatch.setenv("ATTRTEXT_LOG_LEVEL", "error")
    monkeypatch.setenv("ATTRTEXT_COALESCE_RUNS", "yes")
    monkeypatch.setenv("ATTRTEXT_DEBUG_LOGGING", "0")

    overridden = SettingsStore(path).load(overrides={"stylesheet": "custom"})

    assert overridden.stylesheet == "dark"
    assert overridden.log_level == "error"
    assert overridden.coalesce_styled_runs is True
    assert overridden.debug_logging is False
    assert overridden.effective_log_level == logging.ERROR


def test_debug_logging_forces_debug_level() -> None:
    settings = EngineSettings(log_level="ERROR", debug_logging=True)

    assert settings.effective_log_level == logging.DEBUG


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, logging.INFO),
        ("debug", logging.DEBUG),
        (" Warning ", logging.WARNING),
        ("15", 15),
        (logging.ERROR, logging.ERROR),
        ("chatty", logging.INFO),
    ],
)
def test_resolve_log_level(value, expected) -> None:
    assert resolve_log_level(value) == expected
