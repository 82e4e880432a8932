"""CLI for the ``wallet_parser`` package.

Command handlers (``cmd_report``, ``cmd_check_budgets``) return process exit
codes and are wrapped by a Typer console interface. Environment variables are
loaded from a local ``.env`` with ``python-dotenv`` before any command runs.

Environment
-----------
- ``WALLET_PARSER_CATEGORIES``: category configuration path.
- ``WALLET_PARSER_BUDGET``: reference budget amount for overage checks.
- ``WALLET_PARSER_LOG_LEVEL``: log level.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typer.models import OptionInfo

from .logging_setup import configure_logging, get_logger

BUDGET_ENV = "WALLET_PARSER_BUDGET"
_DESCRIPTION_WIDTH = 60

console = Console()
err_console = Console(stderr=True)

_logger = get_logger("wallet_parser.cli")


# ---- Formatting helpers -------------------------------------------------------


def format_eur(amount: float) -> str:
    """Italian-style currency text, e.g. ``-1.234,50 €``."""

    text = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{text} €"


def _truncate(text: str, width: int = _DESCRIPTION_WIDTH) -> str:
    return text if len(text) <= width else text[:width] + "..."


def _resolve_budget(budget: float | None) -> float | None:
    if budget is not None:
        return budget
    raw = os.getenv(BUDGET_ENV)
    if not raw or not raw.strip():
        return None
    try:
        return float(raw.strip().replace(",", "."))
    except ValueError:
        _logger.warning("ignoring non-numeric %s=%r", BUDGET_ENV, raw)
        return None


# ---- Command handlers ---------------------------------------------------------


def cmd_report(
    file_path: str,
    *,
    categories_path: str | None = None,
    budget: float | None = None,
    limit: int = 20,
) -> int:
    """Parse a statement and print totals, categories, overages and transactions.

    Errors are written to stderr and the handler returns ``1``; on success it
    returns ``0``.
    """

    from .aggregate import category_breakdown
    from .api import parse_statement
    from .budget import budget_overages
    from .categories import CategoryRegistry, resolve_category
    from .errors import WalletParserError

    rules = CategoryRegistry(categories_path).snapshot()

    try:
        summary = parse_statement(file_path, rules)
    except WalletParserError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 1

    totals = Table(title="Summary")
    totals.add_column("Income", justify="right", style="green")
    totals.add_column("Expenses", justify="right", style="red")
    totals.add_column("Balance", justify="right")
    totals.add_row(
        format_eur(summary.total_income),
        format_eur(abs(summary.total_expense)),
        format_eur(summary.balance),
    )
    console.print(totals)

    breakdown = category_breakdown(summary)
    if breakdown:
        table = Table(title="Spending by category")
        table.add_column("Category")
        table.add_column("Spent", justify="right")
        table.add_column("Share", justify="right")
        table.add_column("Transactions", justify="right")
        for line in breakdown:
            table.add_row(
                escape(line.label),
                format_eur(line.amount),
                f"{line.percent:.1f}%",
                str(line.count),
            )
        console.print(table)

    reference = _resolve_budget(budget)
    if reference is not None:
        for over in budget_overages(summary, rules, reference):
            colour = "red" if over.severity == "critical" else "yellow"
            console.print(
                f"[{colour}]{escape(over.label)}: spent {format_eur(over.overage)} over budget "
                f"({over.overage_percent:.1f}% over the limit)[/{colour}]"
            )

    listing = Table(title=f"Transactions ({len(summary.transactions)})")
    listing.add_column("Date")
    listing.add_column("Description")
    listing.add_column("Category")
    listing.add_column("Channel")
    listing.add_column("Amount", justify="right")
    for tx in summary.transactions[: max(limit, 0)]:
        colour = "green" if tx.amount >= 0 else "red"
        listing.add_row(
            tx.posting_date,
            escape(_truncate(tx.description)),
            escape(resolve_category(tx.description, rules)),
            escape(tx.channel),
            f"[{colour}]{format_eur(tx.amount)}[/{colour}]",
        )
    console.print(listing)
    return 0


def cmd_check_budgets(*, categories_path: str | None = None) -> int:
    """Print configured budget shares; return ``1`` when they exceed 100%."""

    from .budget import budget_shares, check_budget_shares
    from .categories import load_category_rules

    rules = load_category_rules(categories_path)
    check = check_budget_shares(rules)

    table = Table(title="Budget shares")
    table.add_column("Category")
    table.add_column("Budget", justify="right")
    for label, percent in budget_shares(rules):
        table.add_row(escape(label), f"{percent:g}%")
    console.print(table)

    if check.exceeded:
        console.print(
            f"[yellow]Warning:[/yellow] category budgets add up to {check.total_percent:g}%. "
            "Check the budget configuration."
        )
        return 1
    console.print(f"[green]Budget configuration OK[/green] ({check.total_percent:g}%).")
    return 0


# ---- Typer-based console interface --------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Summarize an Italian bank-statement export (CSV or spreadsheet) by category.",
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
FILE_OPTION: OptionInfo = typer.Option(
    ...,
    "--file",
    help="Statement export: .csv, or a spreadsheet (.xlsx) for any other extension",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)
CATEGORIES_OPTION: OptionInfo = typer.Option(
    "--categories",
    help=(
        "Category configuration JSON "
        "(falls back to WALLET_PARSER_CATEGORIES, then ./categories.json)"
    ),
    dir_okay=False,
)


@app.command("report")
def report_cmd(
    file_path: Annotated[Path, FILE_OPTION],
    categories: Annotated[Path | None, CATEGORIES_OPTION] = None,
    *,
    budget: float | None = typer.Option(
        None,
        help="Reference budget amount for overage checks (falls back to WALLET_PARSER_BUDGET).",
    ),
    limit: int = typer.Option(20, min=0, help="Number of most recent transactions to list."),
) -> None:
    """Parse a statement and print the spending report."""

    code = cmd_report(
        str(file_path),
        categories_path=str(categories) if categories is not None else None,
        budget=budget,
        limit=limit,
    )
    raise typer.Exit(code)


@app.command("check-budgets")
def check_budgets_cmd(
    categories: Annotated[Path | None, CATEGORIES_OPTION] = None,
) -> None:
    """Verify that category budget percentages add up to at most 100%."""

    code = cmd_check_budgets(
        categories_path=str(categories) if categories is not None else None
    )
    raise typer.Exit(code)


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, help="Log level (falls back to WALLET_PARSER_LOG_LEVEL, then INFO)."
    ),
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


if __name__ == "__main__":  # pragma: no cover
    app()
