"""Raw record extraction for CSV and spreadsheet statement exports.

Both input formats go through :func:`extract_rows`, which yields one
:data:`~wallet_parser.models.RawRow` per data row. The first row of the file
is always treated as a header and skipped without looking at its content.

CSV specifics
-------------
- Text is decoded as UTF-8 (BOM tolerated), falling back to cp1252.
- The column separator is taken from the first data line: ``;`` if present,
  else ``|``, else ``,``. The detected separator is applied to every line,
  even when later lines contain other candidates inside free text.
- Quoting is not interpreted; fields are split on the separator and trimmed.

Spreadsheet specifics
---------------------
- Only the first sheet is read, with positional column indexing.
- Cell values are rendered as text so both formats share the same
  normalization rules (dates as ``DD/MM/YYYY``, numbers with a decimal comma).
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from io import BytesIO
from pathlib import PurePath
from typing import Any

from openpyxl import load_workbook

from .errors import ParseFailure
from .logging_setup import get_logger
from .models import RAW_ROW_WIDTH, RawRow

_logger = get_logger("wallet_parser.extract")

_SEPARATOR_PRIORITY: tuple[str, ...] = (";", "|")
_DEFAULT_SEPARATOR = ","
_FALLBACK_ENCODINGS: tuple[str, ...] = ("utf-8-sig", "cp1252")


class InputFormat(enum.StrEnum):
    CSV = "csv"
    SPREADSHEET = "spreadsheet"


@dataclass(frozen=True, slots=True)
class ExtractOptions:
    """Extraction settings.

    ``separator``: fixed CSV column separator; ``None`` detects it from the
    first data line. ``encoding``: fixed CSV text encoding; ``None`` tries
    UTF-8 then cp1252. Both are ignored for spreadsheets.
    """

    separator: str | None = None
    encoding: str | None = None


def format_for_filename(filename: str | PurePath) -> InputFormat:
    """Pick the input format from the file extension alone.

    ``.csv`` (any case) selects CSV; every other name is read as a spreadsheet.
    """

    suffix = PurePath(filename).suffix.lower()
    return InputFormat.CSV if suffix == ".csv" else InputFormat.SPREADSHEET


def detect_separator(line: str) -> str:
    for sep in _SEPARATOR_PRIORITY:
        if sep in line:
            return sep
    return _DEFAULT_SEPARATOR


def extract_rows(
    data: bytes,
    fmt: InputFormat,
    options: ExtractOptions | None = None,
) -> Iterator[RawRow]:
    """Yield the raw six-field rows of ``data`` read as ``fmt``.

    Rows with fewer than six fields are dropped; extra fields are ignored.
    Empty input yields nothing. Raises :class:`ParseFailure` when the content
    cannot be decoded, opened or read (raised while iterating).
    """

    opts = options or ExtractOptions()
    if not data:
        return
    if fmt is InputFormat.CSV:
        cells = _iter_csv_cells(_decode_text(data, opts.encoding), opts.separator)
    else:
        cells = _iter_sheet_cells(data)
    yield from _fixed_width(cells)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fixed_width(rows: Iterable[list[str]]) -> Iterator[RawRow]:
    for pos, row in enumerate(rows, start=1):
        if len(row) < RAW_ROW_WIDTH:
            _logger.debug("dropped: %d field(s)", len(row), extra={"row": pos})
            continue
        yield (row[0], row[1], row[2], row[3], row[4], row[5])


def _decode_text(data: bytes, encoding: str | None) -> str:
    encodings = (encoding,) if encoding else _FALLBACK_ENCODINGS
    last_err: UnicodeDecodeError | None = None
    for enc in encodings:
        try:
            return data.decode(enc)
        except UnicodeDecodeError as e:
            last_err = e
            continue
    tried = ", ".join(encodings)
    raise ParseFailure(f"Could not decode CSV text ({tried}): {last_err}") from last_err


def _iter_csv_cells(text: str, separator: str | None) -> Iterator[list[str]]:
    data_lines = text.split("\n")[1:]
    if not data_lines:
        return
    sep = separator or detect_separator(data_lines[0])
    _logger.debug("CSV separator %r", sep)
    for line in data_lines:
        if not line.strip():
            continue
        yield [col.strip() for col in line.split(sep)]


def _iter_sheet_cells(data: bytes) -> Iterator[list[str]]:
    try:
        wb = load_workbook(BytesIO(data), read_only=True, data_only=True)
    except Exception as e:
        raise ParseFailure(f"Could not open spreadsheet: {e}") from e

    try:
        # Sheet XML is parsed lazily, so damage only surfaces while iterating
        for values in _first_sheet_rows(wb):
            cells = list(values)
            # Trailing empty cells do not count as columns
            while cells and (cells[-1] is None or cells[-1] == ""):
                cells.pop()
            if cells:
                yield [_cell_text(v) for v in cells]
    except Exception as e:
        raise ParseFailure(f"Could not read spreadsheet: {e}") from e
    finally:
        wb.close()


def _first_sheet_rows(wb: Any) -> Iterator[tuple[Any, ...]]:
    if not wb.sheetnames:
        return iter(())
    rows = wb[wb.sheetnames[0]].iter_rows(values_only=True)
    next(rows, None)  # header
    return rows


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        # Plain positional digits with a decimal comma; the amount normalizer
        # treats dots as thousands separators and rejects exponents
        return format(Decimal(str(value)), "f").replace(".", ",")
    return str(value).strip()


__all__ = [
    "ExtractOptions",
    "InputFormat",
    "detect_separator",
    "extract_rows",
    "format_for_filename",
]
