"""
Tests for render_mcp/logging_utils.py.
"""

import logging
import sys

import pytest

from render_mcp import logging_utils
from render_mcp.logging_utils import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_logging():
    root = logging.getLogger("render_mcp")
    handlers = list(root.handlers)
    level = root.level
    propagate = root.propagate
    configured = logging_utils._configured
    logging_utils._configured = False
    root.handlers = []
    yield
    root.handlers = handlers
    root.setLevel(level)
    root.propagate = propagate
    logging_utils._configured = configured


class TestGetLogger:

    def test_returns_named_logger(self):
        logger = get_logger("render_mcp.session")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "render_mcp.session"

    def test_same_instance(self):
        assert get_logger("render_mcp.x") is get_logger("render_mcp.x")


class TestConfigureLogging:

    def test_installs_single_stderr_handler(self):
        configure_logging("DEBUG")
        configure_logging("DEBUG")
        root = logging.getLogger("render_mcp")
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        configure_logging()
        assert logging.getLogger("render_mcp").level == logging.WARNING

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        configure_logging("debug")
        assert logging.getLogger("render_mcp").level == logging.DEBUG

    def test_unknown_level_defaults_to_info(self):
        configure_logging("LOUD")
        assert logging.getLogger("render_mcp").level == logging.INFO

    def test_reconfigure_adjusts_level(self):
        configure_logging("INFO")
        configure_logging("ERROR")
        assert logging.getLogger("render_mcp").level == logging.ERROR
