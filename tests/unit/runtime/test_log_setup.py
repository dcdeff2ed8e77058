"""Tests for logging configuration."""

import logging
import sys

import pytest
from loguru import logger

from src.trpg.runtime.config.config_data import ConfigData
from src.trpg.runtime.context import with_context
from src.trpg.runtime.log_setup import InterceptHandler, configure_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)
    logging.basicConfig(handlers=[], force=True)


class TestConfigureLogging:
    def test_file_sink_and_stdlib_intercept(self, tmp_path):
        log_file = tmp_path / "logs" / "trpg.log"
        override = ConfigData()
        override.logging.file = str(log_file)
        override.logging.format = "plain"

        with with_context(override):
            configure_logging()
            logging.getLogger("some.library").warning("from stdlib")

        assert any(isinstance(h, InterceptHandler) for h in logging.root.handlers)

        logger.complete()
        logger.remove()
        content = log_file.read_text()
        assert "Logging configured" in content
        assert "from stdlib" in content

    def test_without_file_sink(self, tmp_path):
        override = ConfigData()
        override.logging.file = None

        with with_context(override):
            configure_logging()

        assert list(tmp_path.iterdir()) == []
