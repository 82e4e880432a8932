"""Budget checks over category rules and a parsed statement.

Category budgets are percentages of a reference budget amount supplied by the
caller. A category is over budget only when its spend magnitude is strictly
greater than its allowance.
"""

from __future__ import annotations

from collections.abc import Sequence

from .models import BudgetOverage, BudgetShareCheck, CategoryRule, Summary

CRITICAL_OVERAGE_PERCENT = 10.0
MAX_TOTAL_BUDGET_PERCENT = 100.0


def budget_overage(
    label: str,
    category_expense: float,
    budget_percent: float,
    reference: float,
) -> BudgetOverage | None:
    """Return the overage of ``category_expense`` against its allowance, or ``None``.

    ``category_expense`` may carry the negative expense sign; its magnitude is
    compared with ``budget_percent / 100 * reference``.
    """

    allowance = budget_percent / 100 * reference
    spent = abs(category_expense)
    if spent <= allowance:
        return None
    overage = spent - allowance
    overage_percent = (overage / allowance * 100) if allowance > 0 else float("inf")
    return BudgetOverage(
        label=label,
        budget_percent=budget_percent,
        allowance=allowance,
        spent=spent,
        overage=overage,
        overage_percent=overage_percent,
        severity="critical" if overage_percent > CRITICAL_OVERAGE_PERCENT else "warning",
    )


def budget_overages(
    summary: Summary, rules: Sequence[CategoryRule], reference: float
) -> list[BudgetOverage]:
    """Overages for every rule that has a budget, in rule order."""

    found: list[BudgetOverage] = []
    for rule in rules:
        if rule.budget_percent is None:
            continue
        spent = summary.category_expenses.get(rule.label, 0.0)
        over = budget_overage(rule.label, spent, rule.budget_percent, reference)
        if over is not None:
            found.append(over)
    return found


def total_budget_percent(rules: Sequence[CategoryRule]) -> float:
    return sum(rule.budget_percent or 0.0 for rule in rules)


def check_budget_shares(rules: Sequence[CategoryRule]) -> BudgetShareCheck:
    """Flag configurations whose category budgets add up to more than 100%."""

    total = total_budget_percent(rules)
    return BudgetShareCheck(total_percent=total, exceeded=total > MAX_TOTAL_BUDGET_PERCENT)


def budget_shares(rules: Sequence[CategoryRule]) -> list[tuple[str, float]]:
    """``(label, budget_percent)`` for rules with a positive budget."""

    return [
        (rule.label, rule.budget_percent)
        for rule in rules
        if rule.budget_percent is not None and rule.budget_percent > 0
    ]


__all__ = [
    "CRITICAL_OVERAGE_PERCENT",
    "MAX_TOTAL_BUDGET_PERCENT",
    "budget_overage",
    "budget_overages",
    "budget_shares",
    "check_budget_shares",
    "total_budget_percent",
]
