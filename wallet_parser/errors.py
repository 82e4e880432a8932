"""Exceptions raised by the statement pipeline.

Row-level problems (too few columns, blank posting date, unparsable amount)
are not errors: those rows are dropped by the retention filter. Only failures
that abort the whole file are represented here.
"""

from __future__ import annotations


class WalletParserError(Exception):
    """Base class for failures surfaced to callers of ``wallet_parser``."""


class ReadFailure(WalletParserError):
    """The statement file could not be read (missing, permission denied, I/O error)."""


class ParseFailure(WalletParserError):
    """The file content could not be interpreted as tabular data."""


__all__ = ["ParseFailure", "ReadFailure", "WalletParserError"]
