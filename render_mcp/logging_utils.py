"""
Standardized logging configuration.

All modules should use:
    from render_mcp.logging_utils import get_logger
    logger = get_logger(__name__)

Logs go to stderr: in stdio mode stdout carries the MCP wire protocol.
"""

import logging
import os
import sys

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(name)


def configure_logging(level: str | None = None) -> None:
    """
    Configure the root render_mcp logger.

    Idempotent: repeated calls only adjust the level.

    Args:
        level: Level name (DEBUG, INFO, ...). Defaults to LOG_LEVEL env var or INFO.
    """
    global _configured

    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger("render_mcp")
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    _configured = True
