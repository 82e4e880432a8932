"""Statement aggregation: totals, per-category spend and ordering.

Transactions with ``amount == 0`` belong to neither partition: they do not
contribute to totals or category sums but remain in
:attr:`~wallet_parser.models.Summary.transactions`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from types import MappingProxyType

from .categories import resolve_category
from .models import CategoryBreakdown, CategoryRule, Summary, Transaction


def _posting_sort_key(tx: Transaction) -> date:
    # Unparseable posting dates sort after every valid date
    return tx.posting_day or date.min


def sort_by_posting_date(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Most recent posting date first; equal dates keep their input order."""

    # sorted() is stable; reverse=True preserves the input order of ties
    return sorted(transactions, key=_posting_sort_key, reverse=True)


def aggregate(transactions: Iterable[Transaction], rules: Sequence[CategoryRule]) -> Summary:
    """Build the :class:`Summary` for ``transactions`` categorized with ``rules``.

    ``rules`` is read only; pass a snapshot when the rule set may be reloaded
    concurrently.
    """

    items = list(transactions)

    total_income = 0.0
    total_expense = 0.0
    category_expenses: dict[str, float] = {}
    category_counts: dict[str, int] = {}

    for tx in items:
        if tx.amount > 0:
            total_income += tx.amount
        elif tx.amount < 0:
            total_expense += tx.amount
            label = resolve_category(tx.description, rules)
            category_expenses[label] = category_expenses.get(label, 0.0) + tx.amount
            category_counts[label] = category_counts.get(label, 0) + 1

    return Summary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income + total_expense,
        category_expenses=MappingProxyType(category_expenses),
        category_counts=MappingProxyType(category_counts),
        transactions=tuple(sort_by_posting_date(items)),
    )


def category_breakdown(summary: Summary) -> list[CategoryBreakdown]:
    """Per-category spend, largest first, with share of total expense and count."""

    total = abs(summary.total_expense)
    lines = [
        CategoryBreakdown(
            label=label,
            amount=abs(amount),
            percent=(abs(amount) / total * 100) if total else 0.0,
            count=summary.category_counts.get(label, 0),
        )
        for label, amount in summary.category_expenses.items()
    ]
    lines.sort(key=lambda b: b.amount, reverse=True)
    return lines


__all__ = ["aggregate", "category_breakdown", "sort_by_posting_date"]
