"""Settings dataclasses and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

__all__ = ["EngineSettings", "SettingsStore", "resolve_log_level"]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".attrtext"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "ATTRTEXT_STYLESHEET": "stylesheet",
    "ATTRTEXT_LOG_LEVEL": "log_level",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "ATTRTEXT_DEBUG_LOGGING": "debug_logging",
    "ATTRTEXT_COALESCE_RUNS": "coalesce_styled_runs",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


@dataclass(slots=True)
class EngineSettings:
    """User-configurable engine settings persisted between sessions."""

    stylesheet: str = "plain"
    stylesheet_paths: list[str] = field(default_factory=list)
    coalesce_styled_runs: bool = False
    log_level: str = "INFO"
    debug_logging: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def effective_log_level(self) -> int:
        if self.debug_logging:
            return logging.DEBUG
        return resolve_log_level(self.log_level)


def resolve_log_level(value: str | int | None) -> int:
    """Translate ``"debug"``/``"INFO"``/``10`` into a :mod:`logging` level."""

    if isinstance(value, int):
        return value
    if not value:
        return logging.INFO
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    if isinstance(level, int):
        return level
    LOGGER.warning("Unknown log level %r; using INFO", value)
    return logging.INFO


class SettingsStore:
    """Persistence adapter for :class:`EngineSettings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> EngineSettings:
        """Load settings from disk, applying CLI/environment overrides when present."""

        payload = self._read_payload()
        settings = EngineSettings()
        if payload:
            data = _filter_fields(payload)
            try:
                settings = EngineSettings(**data)
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = EngineSettings()
            LOGGER.debug("Settings loaded from %s: stylesheet=%s", self._path, settings.stylesheet)

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        return self._apply_env_overrides(settings)

    def save(self, settings: EngineSettings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            payload = json.loads(text)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s must contain a JSON object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: EngineSettings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> EngineSettings:
        allowed = {item.name for item in fields(EngineSettings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        metadata_override = filtered.get("metadata")
        if isinstance(metadata_override, Mapping):
            merged_metadata = dict(settings.metadata or {})
            merged_metadata.update(metadata_override)
            filtered["metadata"] = merged_metadata
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: EngineSettings) -> EngineSettings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {item.name for item in fields(EngineSettings)}
    unknown = sorted(key for key in payload if key not in allowed and key != "version")
    if unknown:
        LOGGER.warning("Ignoring unknown settings keys: %s", unknown)
    return {key: value for key, value in payload.items() if key in allowed}
