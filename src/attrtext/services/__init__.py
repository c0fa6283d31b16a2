"""Service layer helpers (settings persistence)."""

from .settings import EngineSettings, SettingsStore, resolve_log_level

__all__ = ["EngineSettings", "SettingsStore", "resolve_log_level"]
