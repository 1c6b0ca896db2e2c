"""Tests for the logging helpers."""

import logging
from unittest.mock import MagicMock

import pytest

from src.infrastructure.logging import logger as logger_module


@pytest.fixture
def logs_root(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "_today_stamp",
        staticmethod(lambda: "20240201"),
    )
    return tmp_path


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_builder_writes_dated_file_under_subdir(logs_root):
    """Records land in logs/<subdir>/<date>_<prefix>.log."""
    built = (
        logger_module.LoggerBuilder()
        .name("valuation_builder_test")
        .subdir("usage")
        .prefix("usage_logs")
        .console(False)
        .build()
    )
    try:
        built.info("page=%s period=%s", "Overview", "YTD")
        for handler in built.handlers:
            handler.flush()

        log_path = logs_root / "logs" / "usage" / "20240201_usage_logs.log"
        assert log_path.exists()
        content = log_path.read_text(encoding="utf-8")
        assert "page=Overview period=YTD" in content
        assert "| INFO | valuation_builder_test |" in content
        assert built.propagate is False
    finally:
        _close_handlers(built)


def test_builder_respects_level_and_reuses_handlers(logs_root):
    """A second build returns the logger without stacking handlers."""
    builder = (
        logger_module.LoggerBuilder()
        .name("valuation_level_test")
        .level(logging.WARNING)
        .console(True)
    )
    built = builder.build()
    try:
        assert built.level == logging.WARNING
        assert len(built.handlers) == 2
        assert builder.build() is built
        assert len(built.handlers) == 2
    finally:
        _close_handlers(built)


def test_builder_uses_injected_factories(logs_root):
    """Custom formatter and handler factories are wired together."""
    fmt = logging.Formatter("%(message)s")
    captured = {}

    def _file_handler(path, formatter):
        captured["path"] = path
        captured["formatter"] = formatter
        return logging.NullHandler()

    built = (
        logger_module.LoggerBuilder()
        .name("valuation_factory_test")
        .subdir("app")
        .prefix("app_logs")
        .console(False)
        .formatter(lambda: fmt)
        .file_handler(_file_handler)
        .build()
    )
    try:
        assert captured["formatter"] is fmt
        assert captured["path"] == logs_root / "logs" / "app" / "20240201_app_logs.log"
        assert len(built.handlers) == 1
    finally:
        _close_handlers(built)


def test_app_and_usage_loggers_are_separate_singletons(monkeypatch):
    """Each logger flavour is created once and configured with its own subdir."""
    built_with = []

    def _fake_build(self):
        built_with.append((self._name, self._subdir, self._prefix))
        return MagicMock()

    monkeypatch.setattr(logger_module.LoggerBuilder, "build", _fake_build)
    monkeypatch.setattr(logger_module.AppLogger, "_instance", None)
    monkeypatch.setattr(logger_module.UsageLogger, "_instance", None)

    app_logger = logger_module.get_app_logger()
    usage_logger = logger_module.get_usage_logger()

    assert logger_module.get_app_logger() is app_logger
    assert logger_module.get_usage_logger() is usage_logger
    assert app_logger is not usage_logger
    assert built_with == [
        ("valuation_app", "app", "app_logs"),
        ("valuation_usage", "usage", "usage_logs"),
    ]


def test_logger_forwards_arguments(monkeypatch):
    """Lazy %-style arguments reach the wrapped logger untouched."""
    wrapped = MagicMock()
    monkeypatch.setattr(logger_module.LoggerBuilder, "build", lambda self: wrapped)
    monkeypatch.setattr(logger_module.AppLogger, "_instance", None)

    app_logger = logger_module.get_app_logger()
    app_logger.warning("missing price for %s", "ACME")
    app_logger.error("ledger unavailable")
    app_logger.debug("rates=%d", 3)

    wrapped.warning.assert_called_once_with("missing price for %s", "ACME")
    wrapped.error.assert_called_once_with("ledger unavailable")
    wrapped.debug.assert_called_once_with("rates=%d", 3)
