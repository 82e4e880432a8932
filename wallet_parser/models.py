"""Data models and type aliases for ``wallet_parser``.

The statement layout is positional: every data row carries six columns in the
order posting date, value date, amount, currency, description, channel. Column
headers are never inspected.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Raw rows and transactions
# ---------------------------------------------------------------------------

RAW_ROW_WIDTH = 6
DEFAULT_CURRENCY = "EUR"
OTHER_CATEGORY = "Other"
DATE_FORMAT = "%d/%m/%Y"

RawRow: TypeAlias = tuple[str, str, str, str, str, str]
"""Six trimmed text fields as extracted from one data row."""


def parse_posting_date(raw: str | None) -> date | None:
    """Parse ``DD/MM/YYYY`` (time suffixes ignored); ``None`` when invalid."""

    if raw is None:
        return None
    s = raw.strip()
    if not s:
        return None
    try:
        return datetime.strptime(s.split()[0], DATE_FORMAT).date()
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single normalized statement row.

    ``posting_date`` and ``value_date`` keep the source text (``DD/MM/YYYY``);
    use :attr:`posting_day` for the parsed calendar date. ``amount`` is signed:
    negative values are expenses, positive values income.
    """

    posting_date: str
    value_date: str
    amount: float
    currency: str
    description: str
    channel: str

    @property
    def posting_day(self) -> date | None:
        return parse_posting_date(self.posting_date)


@dataclass(frozen=True, slots=True)
class Summary:
    """Aggregate view over one parsed statement.

    ``category_expenses`` and ``category_counts`` only cover transactions
    with ``amount < 0``; sums keep the negative sign. Both are read-only
    mappings. ``transactions`` holds
    every retained row sorted by posting date, most recent first.
    """

    total_income: float = 0.0
    total_expense: float = 0.0
    balance: float = 0.0
    category_expenses: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    category_counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    transactions: tuple[Transaction, ...] = ()


@dataclass(frozen=True, slots=True)
class CategoryBreakdown:
    """One line of the per-category spending view.

    ``amount`` is the spend magnitude; ``percent`` is its share of the total
    expense magnitude (0 when there is no expense at all).
    """

    label: str
    amount: float
    percent: float
    count: int


@dataclass(frozen=True, slots=True)
class BudgetOverage:
    """Spend above a category's share of a reference budget.

    Attributes
    ----------
    allowance:
        ``budget_percent / 100 * reference``.
    spent:
        Magnitude of the category's expense sum.
    overage:
        ``spent - allowance`` (always positive).
    overage_percent:
        ``overage`` relative to ``allowance``, in percent.
    severity:
        ``"critical"`` above 10% over the allowance, ``"warning"`` otherwise.
    """

    label: str
    budget_percent: float
    allowance: float
    spent: float
    overage: float
    overage_percent: float
    severity: str


@dataclass(frozen=True, slots=True)
class BudgetShareCheck:
    total_percent: float
    exceeded: bool


# ---------------------------------------------------------------------------
# Category configuration
# ---------------------------------------------------------------------------


class CategoryRule(BaseModel):
    """A category label plus the ordered keywords that select it.

    Keywords are stored lowercased with order preserved and duplicates
    removed. ``budget_percent`` is read from the ``budget`` key of the JSON
    configuration.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    label: str
    keywords: tuple[str, ...] = ()
    budget_percent: float | None = Field(default=None, alias="budget")

    @field_validator("label")
    @classmethod
    def _label_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("label must be non-empty")
        return v

    @field_validator("keywords")
    @classmethod
    def _normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for kw in v:
            k = kw.lower()
            if k.strip():
                seen.setdefault(k, None)
        return tuple(seen)


class CategoryConfig(BaseModel):
    """Top-level schema of the category configuration JSON."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    categories: tuple[CategoryRule, ...] = ()


__all__ = [
    "BudgetOverage",
    "BudgetShareCheck",
    "CategoryBreakdown",
    "CategoryConfig",
    "CategoryRule",
    "DATE_FORMAT",
    "DEFAULT_CURRENCY",
    "OTHER_CATEGORY",
    "RAW_ROW_WIDTH",
    "RawRow",
    "Summary",
    "Transaction",
    "parse_posting_date",
]
