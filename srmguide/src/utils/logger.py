"""
SRM Guide - Logging
====================
Logger factory used by every module.  Each line names the component
that wrote it, taken from the module path:

    2024-07-15 09:30:00 | WARNING  | core.ai_client    | [AI] Transient failure ...

``srmguide.src.core.ai_client`` is shown as ``core.ai_client`` and
``srmguide.config.settings`` as ``config.settings``; loggers outside the
package keep their full name.

Verbosity follows ``settings.ENV`` (``dev`` → DEBUG, ``prod`` → WARNING)
unless a level is passed explicitly.

Usage:
    from srmguide.src.utils.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys

from srmguide.config.settings import settings

_ENV_LEVEL_MAP = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
}
_PACKAGE_PREFIXES = ("srmguide.src.", "srmguide.")
_LINE_FORMAT = "%(asctime)s | %(levelname)-8s | %(component)-17s | %(message)s"


def component_name(logger_name: str) -> str:
    """Strip the package prefix from a dotted logger name."""
    for prefix in _PACKAGE_PREFIXES:
        if logger_name.startswith(prefix):
            return logger_name[len(prefix):]
    return logger_name


class _ComponentFilter(logging.Filter):
    """Attach ``record.component`` for the line format."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.component = component_name(record.name)
        return True


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Return the logger for *name*, configured on first use.

    A second call with the same name returns the same logger untouched,
    so the handler is never attached twice.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    resolved_level = level if level is not None else _ENV_LEVEL_MAP.get(settings.ENV, logging.INFO)
    logger.setLevel(resolved_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved_level)
    handler.addFilter(_ComponentFilter())
    handler.setFormatter(logging.Formatter(fmt=_LINE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
