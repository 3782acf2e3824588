"""Logging for rank runs and market summaries.

Every logger hangs off the ``supplier_matching`` namespace, writes one line per
record to stderr and stamps it in UTC so artefacts and logs line up.

Usage example:
    from supplier_matching.observability.logging import get_logger

    logger = get_logger("matching")  # -> supplier_matching.matching
    logger.info("Ranked %s candidates", candidate_count)
"""

from __future__ import annotations

import logging
import time

ROOT_LOGGER_NAME = "supplier_matching"
_LINE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_UTC_TIMESTAMP = "%Y-%m-%dT%H:%M:%S%z"


def qualified_name(name: str) -> str:
    """Place a short logger name under the package namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return name
    return f"{ROOT_LOGGER_NAME}.{name}"


def _stderr_handler() -> logging.Handler:
    formatter = logging.Formatter(fmt=_LINE_FORMAT, datefmt=_UTC_TIMESTAMP)
    formatter.converter = time.gmtime
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Return the named matching logger, configuring it on first use.

    Args:
        name: Short (``"matching"``) or fully qualified logger name.
        level: Level applied only when the logger is first configured.
    """
    logger = logging.getLogger(qualified_name(name))
    if logger.handlers:
        return logger
    logger.addHandler(_stderr_handler())
    logger.setLevel(level)
    logger.propagate = False
    return logger
