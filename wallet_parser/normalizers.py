"""Raw row → :class:`~wallet_parser.models.Transaction` normalization.

Normalization never raises: every raw row becomes a well-typed record, and
rejection is decided afterwards by :func:`is_retained`. An amount that cannot
be parsed is represented as ``nan`` and the row is rejected; there is no
silent fallback to zero.

Amounts follow Italian conventions: ``.`` groups thousands and ``,`` marks the
decimals (``"1.234,56"`` → ``1234.56``, ``"-9,5"`` → ``-9.5``).
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable

from .logging_setup import get_logger
from .models import DEFAULT_CURRENCY, RawRow, Transaction, parse_posting_date

_logger = get_logger("wallet_parser.normalizers")

# After the Italian rewrite: optional sign, digits, optional decimal part
_AMOUNT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_amount(raw: str | None) -> float:
    """Parse an Italian-formatted amount; ``nan`` when it is empty or invalid."""

    if raw is None:
        return math.nan
    s = raw.strip().replace(".", "").replace(",", ".")
    if not _AMOUNT_RE.fullmatch(s):
        return math.nan
    return float(s)


def normalize_row(raw: RawRow) -> Transaction:
    posting, value, amount, currency, description, channel = (
        (f or "").strip() for f in raw
    )
    return Transaction(
        posting_date=posting,
        value_date=value,
        amount=parse_amount(amount),
        currency=currency or DEFAULT_CURRENCY,
        description=description,
        channel=channel,
    )


def is_retained(tx: Transaction) -> bool:
    """Retention filter: non-empty posting date and a finite amount."""

    return bool(tx.posting_date) and math.isfinite(tx.amount)


def normalize_rows(rows: Iterable[RawRow]) -> list[Transaction]:
    """Normalize ``rows`` and keep only retained transactions, in input order."""

    kept: list[Transaction] = []
    dropped = 0
    for pos, raw in enumerate(rows, start=1):
        tx = normalize_row(raw)
        if not is_retained(tx):
            dropped += 1
            _logger.debug(
                "dropped: posting_date=%r amount=%r", tx.posting_date, raw[2], extra={"row": pos}
            )
            continue
        kept.append(tx)
    if dropped:
        _logger.info("dropped %d row(s) without a posting date or valid amount", dropped)
    return kept


__all__ = [
    "is_retained",
    "normalize_row",
    "normalize_rows",
    "parse_amount",
    "parse_posting_date",
]
