"""Category rules: keyword resolution and configuration loading.

Resolution is a linear scan: rules in the order given, each rule's keywords in
order, first substring hit wins. Callers must therefore pass rules in a stable
order (the configuration file order).

The configuration is a JSON document::

    {"categories": [{"label": "Ristorazione", "keywords": ["mcdonald"], "budget": 10}]}

Missing, unreadable or malformed configuration is not fatal: it degrades to an
empty rule set, so every transaction resolves to ``"Other"``.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from os import PathLike
from pathlib import Path
from typing import TypeAlias

from pydantic import ValidationError

from .logging_setup import get_logger
from .models import OTHER_CATEGORY, CategoryConfig, CategoryRule

_logger = get_logger("wallet_parser.categories")

CATEGORIES_PATH_ENV = "WALLET_PARSER_CATEGORIES"
_DEFAULT_CATEGORIES_FILE = "categories.json"

CategoryRules: TypeAlias = tuple[CategoryRule, ...]


def resolve_category(description: str, rules: Sequence[CategoryRule]) -> str:
    """Return the label of the first rule with a keyword contained in ``description``.

    Matching is case-insensitive substring containment. Returns
    ``"Other"`` when no keyword of any rule matches.
    """

    text = (description or "").lower()
    for rule in rules:
        for keyword in rule.keywords:
            if keyword in text:
                return rule.label
    return OTHER_CATEGORY


# ---------------------------------------------------------------------------
# Configuration loading
# ---------------------------------------------------------------------------


def default_categories_path() -> Path:
    """Return the category configuration path.

    Default: ``./categories.json`` under the current working directory.
    Override: ``WALLET_PARSER_CATEGORIES`` environment variable.
    """

    configured = os.getenv(CATEGORIES_PATH_ENV)
    if configured and configured.strip():
        return Path(configured.strip()).expanduser()
    return Path.cwd() / _DEFAULT_CATEGORIES_FILE


def parse_category_config(text: str) -> CategoryRules:
    try:
        config = CategoryConfig.model_validate_json(text)
    except ValidationError as e:
        _logger.warning(
            "invalid category configuration, using no rules: %d error(s), first: %s",
            e.error_count(),
            e.errors()[0]["msg"] if e.errors() else "unknown",
        )
        return ()
    return config.categories


def load_category_rules(path: str | PathLike[str] | None = None) -> CategoryRules:
    """Load category rules from ``path`` (or :func:`default_categories_path`)."""

    p = Path(path) if path is not None else default_categories_path()
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        _logger.warning("category configuration not found at %s, using no rules", p)
        return ()
    except (OSError, UnicodeDecodeError) as e:
        _logger.warning("could not read category configuration %s: %s", p, e)
        return ()
    rules = parse_category_config(text)
    _logger.info("loaded %d category rule(s) from %s", len(rules), p)
    return rules


class CategoryRegistry:
    """Holds the current rule snapshot for a session.

    :meth:`snapshot` hands out the immutable tuple in place at call time.
    :meth:`reload` re-reads the configuration and swaps the reference in a
    single assignment, so an aggregation that already took a snapshot keeps
    using it until it finishes.
    """

    def __init__(self, path: str | PathLike[str] | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._rules: CategoryRules | None = None

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else default_categories_path()

    def snapshot(self) -> CategoryRules:
        rules = self._rules
        if rules is None:
            rules = self.reload()
        return rules

    def reload(self) -> CategoryRules:
        rules = load_category_rules(self.path)
        self._rules = rules
        return rules


__all__ = [
    "CATEGORIES_PATH_ENV",
    "CategoryRegistry",
    "CategoryRules",
    "default_categories_path",
    "load_category_rules",
    "parse_category_config",
    "resolve_category",
]
