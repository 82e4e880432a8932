"""Logging for the ``wallet_parser`` package.

Library modules log through ``get_logger("wallet_parser.<module>")`` and never
attach handlers; until the CLI calls :func:`configure_logging` the package
logger only carries a ``NullHandler``.

Rows rejected during extraction or normalization are logged at DEBUG with
``extra={"row": <1-based data row>}``; the console formatter prefixes those
messages with the row position so ``--log-level DEBUG`` reads as a per-row
rejection report.
"""

from __future__ import annotations

import logging
import os

_PKG_LOGGER_NAME = "wallet_parser"
_LEVEL_ENV = "WALLET_PARSER_LOG_LEVEL"
_HANDLER_NAME = "wallet_parser.console"
_FORMAT = "%(levelname)s %(name)s: %(message)s"


class RowFormatter(logging.Formatter):
    """Prefix records that carry a ``row`` attribute with ``row N:``."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        row = getattr(record, "row", None)
        if row is None:
            return text
        return f"row {row}: {text}"


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    return numeric if numeric is not None else logging.INFO


def _console_handler(logger: logging.Logger) -> logging.Handler | None:
    for h in logger.handlers:
        if h.get_name() == _HANDLER_NAME:
            return h
    return None


def configure_logging(level: int | str | None = None) -> logging.Handler:
    """Send package records to ``stderr`` at ``level``.

    ``level`` is an ``int`` or a level name; ``None`` falls back to
    ``WALLET_PARSER_LOG_LEVEL`` and then ``INFO``. Calling it again replaces
    the previous console handler, so the level can be changed at runtime.
    """

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    reset_logging()

    resolved = _parse_level(level)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(resolved)
    handler.setFormatter(RowFormatter(_FORMAT))

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)
    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False
    return handler


def reset_logging() -> None:
    """Detach the console handler installed by :func:`configure_logging`."""

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    handler = _console_handler(logger)
    if handler is None:
        return
    logger.removeHandler(handler)
    handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["RowFormatter", "configure_logging", "get_logger", "reset_logging"]
