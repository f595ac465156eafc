from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from bayesfilter.config import LoggingConfig
from bayesfilter.errors import ConfigError
from bayesfilter.logging import ConsoleFormatter, configure_logging, level_from_string


def test_level_from_string() -> None:
    assert level_from_string("debug") == logging.DEBUG
    assert level_from_string(" Warn ") == logging.WARNING
    with pytest.raises(ConfigError, match="Unknown log level"):
        level_from_string("chatty")


def test_console_formatter_prefixes_symbol() -> None:
    record = logging.LogRecord("bayesfilter", logging.WARNING, __file__, 1, "careful", None, None)

    assert ConsoleFormatter(use_color=False).format(record) == "! careful"
    assert ConsoleFormatter(use_color=True).format(record).endswith(" careful")


def test_configure_logging_sets_level_and_console_handler() -> None:
    configure_logging(LoggingConfig(level="warning"))

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert any(isinstance(handler.formatter, ConsoleFormatter) for handler in root.handlers)
    assert not any(isinstance(handler, RotatingFileHandler) for handler in root.handlers)


def test_configure_logging_writes_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "bayesfilter.log"
    configure_logging(LoggingConfig(level="info", file=log_file))

    root = logging.getLogger()
    assert any(isinstance(handler, RotatingFileHandler) for handler in root.handlers)

    logging.getLogger("bayesfilter.test").info("trained")
    for handler in root.handlers:
        handler.flush()

    assert "bayesfilter.test: trained" in log_file.read_text(encoding="utf-8")
