"""Tests for the package logger setup."""

import logging

import pytest

from socialgraph.logging_config import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("socialgraph")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_console_only(package_logger):
    setup_logging(logging.DEBUG)
    assert package_logger.level == logging.DEBUG
    assert [type(h) for h in package_logger.handlers] == [logging.StreamHandler]


def test_repeated_setup_replaces_handlers(package_logger, tmp_path):
    log_file = tmp_path / "viewer.log"
    setup_logging(logging.INFO, str(log_file))
    setup_logging(logging.INFO, str(log_file))
    assert len(package_logger.handlers) == 2

    logging.getLogger("socialgraph.model.scene").info("Loaded 3 nodes")
    for handler in package_logger.handlers:
        handler.flush()
    assert "socialgraph.model.scene - INFO - Loaded 3 nodes" in log_file.read_text(encoding="utf-8")
