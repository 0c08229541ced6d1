"""
Standard-library logging for the Bracket League engine.

Modules that log plain messages use logging.getLogger(__name__) under the
"bracket_league" namespace; setup_logging attaches the handlers once for the
whole package.
"""
import logging
import sys
from pathlib import Path
from typing import Optional
import os

from pythonjsonlogger import jsonlogger


CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return jsonlogger.JsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(fmt=CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    name: str = "bracket_league",
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env var LOG_LEVEL
        log_file: Optional file path for log output
        log_format: "json" or "console". Defaults to env var LOG_FORMAT, then
            to json in production and console elsewhere

    Returns:
        Configured logger instance
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if log_format is None:
        env = os.getenv("ENVIRONMENT", "development").lower()
        log_format = os.getenv("LOG_FORMAT", "json" if env == "production" else "console")

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Calling twice (CLI re-entry, tests) must not duplicate output
    logger.handlers = []

    formatter = _formatter(log_format)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
