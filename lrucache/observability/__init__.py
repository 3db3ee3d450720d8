"""Observability utilities: logging setup.

This module configures standard logging and `structlog` so that library
records (emitted through ``logging.getLogger(__name__)`` with ``extra=``
fields) and any structlog loggers share one level.
"""

from __future__ import annotations

import logging

import structlog


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Parameters
    ----------
    level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
        Unknown names fall back to INFO.

    Behavior
    --------
    - Initializes Python's logging with the requested level.
    - Configures structlog with a filtering bound logger at the same level.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logging.basicConfig(
        level=numeric_level,
        format=("%(asctime)s %(levelname)s %(name)s - %(message)s"),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    logging.getLogger("lrucache").setLevel(numeric_level)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
    )
