"""Observability utilities: logging setup.

This module configures standard logging and, if available, integrates
`structlog` for structured logs. The dependency on `structlog` is optional to
keep the base runtime lightweight.
"""

from __future__ import annotations

import importlib
import logging

PACKAGE_LOGGERS = [
    "lru_collection",
    "lru_collection.collection",
    "lru_collection.utils.cache",
]


def setup_logging(level: str = "INFO", debug_cache: bool = False) -> None:
    """Configure application logging.

    Parameters
    ----------
    level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    debug_cache: bool
        Force DEBUG on the collection loggers regardless of `level`, to see
        per-operation events (stale reads, replacements, removals).

    Behavior
    --------
    - Initializes Python's logging with the requested level.
    - If `structlog` is installed, configures it with a filtering bound logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=("%(asctime)s %(levelname)s %(name)s - %(message)s"),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    if debug_cache:
        for logger_name in PACKAGE_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.DEBUG)

    try:  # optional structlog
        structlog = importlib.import_module("structlog")
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        )
    except ModuleNotFoundError:  # pragma: no cover
        pass
