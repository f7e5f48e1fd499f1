"""Unit tests for logging setup."""
import logging

import pytest

from lumi.core import logging as lumi_logging


@pytest.fixture
def fresh_logger(monkeypatch):
    """Run setup_logging as if for the first time, restoring handlers after."""
    logger = logging.getLogger(lumi_logging.LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    saved_propagate = logger.propagate
    monkeypatch.setattr(lumi_logging, "_initialized", False)
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)
    logger.propagate = saved_propagate


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_handler_and_level(self, fresh_logger):
        logger = lumi_logging.setup_logging("debug")

        assert logger is fresh_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_handlers_added_once(self, fresh_logger):
        lumi_logging.setup_logging("INFO")
        lumi_logging.setup_logging("WARNING")

        assert len(fresh_logger.handlers) == 1
        assert fresh_logger.level == logging.WARNING

    def test_file_handler(self, fresh_logger, tmp_path):
        log_file = tmp_path / "logs" / "lumi.log"

        lumi_logging.setup_logging("INFO", log_file)
        logging.getLogger("lumi.test").info("signal received")
        for handler in fresh_logger.handlers:
            handler.flush()

        assert "signal received" in log_file.read_text()

    def test_unknown_level_defaults_to_info(self, fresh_logger):
        assert lumi_logging.setup_logging("LOUD").level == logging.INFO

    def test_does_not_propagate_to_root(self, fresh_logger):
        lumi_logging.setup_logging("INFO")

        assert fresh_logger.propagate is False

    def test_unwritable_log_file_keeps_console(self, fresh_logger, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        logger = lumi_logging.setup_logging("INFO", blocker / "lumi.log")

        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0], logging.FileHandler)
