"""Bootstrap helpers wiring settings, logging and style sheets together."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional

from .core.buffer import TextBuffer
from .core.errors import StyleSheetError
from .resolver.resolver import Resolver
from .runs.builder import RunBuilder
from .services.settings import EngineSettings, SettingsStore
from .stylesheet.manager import StyleSheetManager, stylesheet_manager
from .stylesheet.models import StyleSheet
from .text import AttributedText
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class EngineContext:
    """Resolved configuration shared by every :class:`AttributedText` a host creates."""

    settings: EngineSettings
    stylesheet: StyleSheet
    resolver: Resolver
    imported: List[str] = field(default_factory=list)

    def run_builder(self) -> RunBuilder:
        # Builders carry mutable policy state, so each text gets its own.
        return self.stylesheet.build_run_builder()

    def create_text(self, text: TextBuffer | str | bytes | None = "") -> AttributedText:
        return AttributedText(
            text,
            resolver=self.resolver,
            builder=self.run_builder(),
            coalesce=self.settings.coalesce_styled_runs,
        )


def configure_logging(settings: EngineSettings, *, log_dir: Path | str | None = None, force: bool = False) -> None:
    """Configure structured logging for the engine."""

    logging_utils.configure_from_settings(settings, log_dir=log_dir, force=force)
    _LOGGER.debug("Logging configured (level=%s)", logging.getLevelName(settings.effective_log_level))


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> EngineSettings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    return active_store.load(overrides=overrides)


def bootstrap(
    settings_path: Path | str | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
    manager: StyleSheetManager | None = None,
    setup_logging: bool = False,
    log_dir: Path | str | None = None,
) -> EngineContext:
    """Load settings, import configured style sheets, and build the shared resolver."""

    raw_path = settings_path or os.environ.get("ATTRTEXT_SETTINGS_PATH")
    resolved_path = Path(raw_path).expanduser() if raw_path else None
    settings = load_settings(resolved_path, overrides=overrides)
    if setup_logging:
        configure_logging(settings, log_dir=log_dir)

    registry = manager or stylesheet_manager
    imported: List[str] = []
    for entry in settings.stylesheet_paths:
        try:
            sheet = registry.import_stylesheet(Path(entry).expanduser())
        except (OSError, StyleSheetError) as exc:
            _LOGGER.warning("Skipping style sheet %s: %s", entry, exc)
            continue
        imported.append(sheet.name)

    stylesheet = registry.resolve(settings.stylesheet)
    _LOGGER.debug("Using style sheet '%s' (%d rule(s))", stylesheet.name, len(stylesheet.rules))
    return EngineContext(
        settings=settings,
        stylesheet=stylesheet,
        resolver=stylesheet.build_resolver(),
        imported=imported,
    )


__all__ = ["EngineContext", "bootstrap", "configure_logging", "load_settings"]
