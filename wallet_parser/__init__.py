"""Public interface for the ``wallet_parser`` package.

Re-exports the pipeline entrypoints and models; there is no runtime logic here.
"""

from .aggregate import aggregate, category_breakdown
from .api import parse_statement, parse_statement_bytes, read_statement
from .budget import budget_overage, budget_overages, budget_shares, check_budget_shares
from .categories import CategoryRegistry, load_category_rules, resolve_category
from .errors import ParseFailure, ReadFailure, WalletParserError
from .extract import ExtractOptions, InputFormat, extract_rows, format_for_filename
from .models import (
    OTHER_CATEGORY,
    BudgetOverage,
    BudgetShareCheck,
    CategoryBreakdown,
    CategoryConfig,
    CategoryRule,
    RawRow,
    Summary,
    Transaction,
)
from .normalizers import normalize_row, normalize_rows, parse_amount

__all__ = [
    # API
    "parse_statement",
    "parse_statement_bytes",
    "read_statement",
    "extract_rows",
    "format_for_filename",
    "normalize_row",
    "normalize_rows",
    "parse_amount",
    "resolve_category",
    "load_category_rules",
    "aggregate",
    "category_breakdown",
    "budget_overage",
    "budget_overages",
    "budget_shares",
    "check_budget_shares",
    # Models / types
    "BudgetOverage",
    "BudgetShareCheck",
    "CategoryBreakdown",
    "CategoryConfig",
    "CategoryRegistry",
    "CategoryRule",
    "ExtractOptions",
    "InputFormat",
    "OTHER_CATEGORY",
    "RawRow",
    "Summary",
    "Transaction",
    # Errors
    "ParseFailure",
    "ReadFailure",
    "WalletParserError",
]
