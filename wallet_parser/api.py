"""Public pipeline entrypoints.

:func:`parse_statement` performs the single file read and then runs
extraction, normalization and aggregation synchronously to completion. Any
failure aborts the whole file: no partial :class:`Summary` is returned.
"""

from __future__ import annotations

from collections.abc import Sequence
from os import PathLike
from pathlib import Path, PurePath

from .aggregate import aggregate
from .errors import ReadFailure
from .extract import ExtractOptions, extract_rows, format_for_filename
from .logging_setup import get_logger
from .models import CategoryRule, Summary
from .normalizers import normalize_rows

_logger = get_logger("wallet_parser.api")


def read_statement(path: str | PathLike[str]) -> bytes:
    """Read the whole statement file, wrapping I/O errors in :class:`ReadFailure`."""

    p = Path(path)
    try:
        return p.read_bytes()
    except FileNotFoundError as e:
        raise ReadFailure(f"File not found: {p}") from e
    except PermissionError as e:
        raise ReadFailure(f"Permission denied: {p}") from e
    except OSError as e:
        raise ReadFailure(f"Could not read '{p}': {e}") from e


def parse_statement_bytes(
    data: bytes,
    filename: str | PurePath,
    rules: Sequence[CategoryRule],
    *,
    options: ExtractOptions | None = None,
) -> Summary:
    """Run the pipeline over in-memory ``data``.

    ``filename`` only selects the input format (``.csv`` or spreadsheet).
    Raises :class:`~wallet_parser.errors.ParseFailure` when the content
    cannot be read as tabular data.
    """

    fmt = format_for_filename(filename)
    transactions = normalize_rows(extract_rows(data, fmt, options))
    summary = aggregate(transactions, rules)
    _logger.info(
        "parsed %s as %s: %d transaction(s), %d categor%s",
        PurePath(filename).name,
        fmt,
        len(summary.transactions),
        len(summary.category_expenses),
        "y" if len(summary.category_expenses) == 1 else "ies",
    )
    return summary


def parse_statement(
    path: str | PathLike[str],
    rules: Sequence[CategoryRule],
    *,
    options: ExtractOptions | None = None,
) -> Summary:
    """Read ``path`` and return its :class:`Summary`.

    Raises :class:`~wallet_parser.errors.ReadFailure` or
    :class:`~wallet_parser.errors.ParseFailure`.
    """

    data = read_statement(path)
    return parse_statement_bytes(data, Path(path).name, rules, options=options)


__all__ = ["parse_statement", "parse_statement_bytes", "read_statement"]
