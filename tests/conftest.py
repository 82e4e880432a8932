"""Pytest configuration for test isolation.

The application reads its category configuration path, reference budget and
log level from ``WALLET_PARSER_*`` environment variables and from a ``.env``
in the working directory. Every test runs from its own temporary directory
with those variables cleared so a developer's local setup cannot leak in.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Sequence
from io import BytesIO
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from wallet_parser import logging_setup

SAMPLE_HEADER = "Data Contabile|Data Valuta|Importo|Divisa|Causale|Canale"


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("WALLET_PARSER_CATEGORIES", "WALLET_PARSER_BUDGET", "WALLET_PARSER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # CLI invocations bind a console handler to the runner's captured stream
    logging_setup.reset_logging()


@pytest.fixture
def make_xlsx() -> Callable[..., bytes]:
    """Build an ``.xlsx`` payload in memory.

    ``make_xlsx(rows)`` writes ``rows`` (header included) to the first sheet;
    ``extra_sheets`` maps additional sheet titles to their rows.
    """

    def _build(
        rows: Sequence[Sequence[Any]],
        *,
        extra_sheets: dict[str, Sequence[Sequence[Any]]] | None = None,
    ) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = "Movimenti"
        for row in rows:
            ws.append(list(row))
        for title, sheet_rows in (extra_sheets or {}).items():
            extra = wb.create_sheet(title)
            for row in sheet_rows:
                extra.append(list(row))
        buf = BytesIO()
        wb.save(buf)
        return buf.getvalue()

    return _build


@pytest.fixture
def write_categories(tmp_path: Path) -> Callable[..., Path]:
    """Write a ``{"categories": [...]}`` JSON file and return its path."""

    def _write(categories: list[dict[str, Any]], name: str = "categories.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"categories": categories}), encoding="utf-8")
        return path

    return _write
