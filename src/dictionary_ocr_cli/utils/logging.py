from __future__ import annotations

import logging
from logging import Logger

PACKAGE_LOGGER = "dictionary_ocr_cli"


def configure_logging(level: int = logging.INFO) -> Logger:
    """
    Configure the package logger with a concise formatter suitable for CLI output.

    Records go to stderr; stdout carries command output such as extracted text.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers:
        logger.setLevel(level)
        return logger

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def set_verbosity(verbose: bool) -> Logger:
    return configure_logging(logging.DEBUG if verbose else logging.INFO)


def get_logger(name: str) -> Logger:
    return logging.getLogger(PACKAGE_LOGGER).getChild(name)
