"""Logging for ``statement_scanner``, rendered through rich.

Library modules log under ``statement_scanner.<module>`` via :func:`get_logger`
and stay silent until the CLI calls :func:`configure_logging`, which routes the
package logger to a ``RichHandler`` on the same ``Console`` that draws the
transaction table and progress spinner.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "statement_scanner"
LOG_LEVEL_ENV = "STATEMENT_SCANNER_LOG_LEVEL"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def resolve_level(level: int | str | None = None) -> int:
    """Return a numeric level from ``level``, the env override, or WARNING.

    Unknown names fall back to WARNING so a typo never silences errors.
    """

    raw = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    if isinstance(raw, int):
        return raw
    if not raw:
        return logging.WARNING
    name = raw.strip().upper()
    if name.isdigit():
        return int(name)
    mapped = logging.getLevelNamesMapping().get(name)
    return mapped if mapped is not None else logging.WARNING


def configure_logging(
    level: int | str | None = None, *, console: Console | None = None
) -> RichHandler:
    """Point the package logger at ``console`` (stderr when omitted).

    Safe to call again: the previous rich handler is replaced rather than
    stacked, so each CLI invocation gets exactly one.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        if isinstance(h, RichHandler | logging.NullHandler):
            logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = RichHandler(
        console=console if console is not None else Console(stderr=True),
        level=resolved,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "PACKAGE_LOGGER", "configure_logging", "get_logger", "resolve_level"]
