"""Tests covering the logging utilities."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from attrtext.services.settings import EngineSettings
from attrtext.utils import logging as logging_utils


@pytest.fixture(autouse=True)
def _restore_package_logger(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(logging_utils, "_CONFIGURED", False)
    monkeypatch.setattr(logging_utils, "_LOG_PATH", None)
    yield
    package_logger = logging.getLogger("attrtext")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


def test_setup_logging_writes_rotating_file(tmp_path: Path) -> None:
    log_path = logging_utils.setup_logging(logging.DEBUG, log_dir=tmp_path, console=False, force=True)

    assert log_path == tmp_path / "attrtext.log"
    assert logging_utils.get_log_path() == log_path

    logging_utils.get_logger("attrtext.tests").info("hello from tests")
    for handler in logging.getLogger("attrtext").handlers:
        handler.flush()

    contents = log_path.read_text(encoding="utf-8")
    assert "hello from tests" in contents
    assert "| INFO     | attrtext.tests |" in contents


def test_setup_logging_is_idempotent_without_force(tmp_path: Path) -> None:
    first = logging_utils.setup_logging(log_dir=tmp_path / "first", console=False)
    second = logging_utils.setup_logging(log_dir=tmp_path / "second", console=False)

    assert second == first
    assert not (tmp_path / "second").exists()
    assert len(logging.getLogger("attrtext").handlers) == 1


def test_log_dir_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ATTRTEXT_LOG_DIR", str(tmp_path / "env-logs"))

    log_path = logging_utils.setup_logging(console=False, force=True)

    assert log_path == tmp_path / "env-logs" / "attrtext.log"
    assert log_path.parent.exists()


def test_console_only_logging_has_no_file(tmp_path: Path) -> None:
    log_path = logging_utils.setup_logging(to_file=False, force=True)

    package_logger = logging.getLogger("attrtext")
    assert log_path is None
    assert [type(handler) for handler in package_logger.handlers] == [logging.StreamHandler]
    assert package_logger.propagate is False


def test_configure_from_settings_uses_effective_level(tmp_path: Path) -> None:
    settings = EngineSettings(log_level="ERROR", debug_logging=True)

    logging_utils.configure_from_settings(settings, log_dir=tmp_path, force=True)

    assert logging.getLogger("attrtext").level == logging.DEBUG
    assert logging.getLogger("ruamel").level == logging.WARNING
