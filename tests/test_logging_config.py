"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from fluentmock_gen.logging_config import configure_logging, get_logger


def test_get_logger_names() -> None:
    assert get_logger().name == "fluentmock_gen"
    assert get_logger("fluentmock_gen.codegen").name == "fluentmock_gen.codegen"
    assert get_logger("tests").name == "fluentmock_gen.tests"


def test_configure_logging_installs_rich_and_file_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"

    logger = configure_logging(level="info", log_file=log_file)
    logger = configure_logging(level="info", log_file=log_file)
    get_logger("codegen").info("hello")

    handlers = logger.handlers
    assert logger.level == logging.INFO
    assert len(handlers) == 2
    assert isinstance(handlers[0], RichHandler)
    handlers[1].flush()
    assert "INFO fluentmock_gen.codegen: hello" in log_file.read_text(encoding="utf-8")

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        configure_logging(level="chatty")
