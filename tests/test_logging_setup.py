"""
Unit tests for CLI logging configuration.
"""

import io
import logging

from pses_session.core.logging_setup import PACKAGE_LOGGER, resolve_level, setup_logger


class TestSetupLogger:
    """Test the package logger handler installed by the CLI."""

    def test_writes_to_given_stream(self):
        stream = io.StringIO()
        logger = setup_logger("info", stream=stream)

        logging.getLogger("pses_session.rendezvous").info("found session file")

        assert logger.name == PACKAGE_LOGGER
        assert "[INFO] pses_session.rendezvous: found session file" in stream.getvalue()

    def test_repeated_calls_keep_one_handler(self):
        setup_logger("info", stream=io.StringIO())
        second = io.StringIO()
        logger = setup_logger("debug", stream=second)

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        logging.getLogger("pses_session.paths").debug("resolved")
        assert "resolved" in second.getvalue()

    def test_root_logger_untouched(self):
        root = logging.getLogger()
        before = list(root.handlers)
        setup_logger("warning", stream=io.StringIO())
        assert root.handlers == before


class TestResolveLevel:

    def test_named_level(self):
        assert resolve_level("debug") == logging.DEBUG

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("PSES_LOGLEVEL", "error")
        assert resolve_level() == logging.ERROR

    def test_unknown_level_defaults_to_info(self):
        assert resolve_level("chatty") == logging.INFO
