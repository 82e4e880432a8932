from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from wallet_parser.api import parse_statement
from wallet_parser.categories import load_category_rules
from wallet_parser.cli import app, format_eur

HEADER = "Data Contabile|Data Valuta|Importo|Divisa|Causale|Canale"
MCDONALDS_ROW = (
    "07/07/2025|07/07/2025|-9,5|EUR|"
    "spesa pagobancomat - carta *3579-mcdonald's|online"
)

runner = CliRunner()


@pytest.fixture
def statement(tmp_path: Path) -> Path:
    path = tmp_path / "estratto.csv"
    path.write_text(f"{HEADER}\n{MCDONALDS_ROW}\n", encoding="utf-8")
    return path


@pytest.fixture
def categories(write_categories) -> Path:
    return write_categories([{"label": "Ristorazione", "keywords": ["mcdonald"], "budget": 10}])


def test_single_row_statement_end_to_end(statement, categories):
    summary = parse_statement(statement, load_category_rules(categories))

    assert summary.total_expense == -9.5
    assert summary.total_income == 0
    assert summary.balance == -9.5
    assert summary.category_expenses == {"Ristorazione": -9.5}
    assert len(summary.transactions) == 1


def test_missing_configuration_categorizes_everything_as_other(statement, tmp_path):
    summary = parse_statement(statement, load_category_rules(tmp_path / "absent.json"))
    assert summary.category_expenses == {"Other": -9.5}


def test_cli_report(statement, categories):
    result = runner.invoke(
        app, ["report", "--file", str(statement), "--categories", str(categories)]
    )
    assert result.exit_code == 0, result.output
    assert "Ristorazione" in result.output
    assert "9,50 €" in result.output
    assert "Transactions (1)" in result.output


def test_cli_report_uses_default_categories_file(statement, write_categories):
    # The working directory is the test's tmp_path, holding ./categories.json
    write_categories([{"label": "Fast food", "keywords": ["mcdonald"]}])
    result = runner.invoke(app, ["report", "--file", str(statement)])
    assert result.exit_code == 0, result.output
    assert "Fast food" in result.output


def test_cli_report_flags_budget_overage(statement, categories):
    result = runner.invoke(
        app,
        ["report", "--file", str(statement), "--categories", str(categories), "--budget", "50"],
    )
    assert result.exit_code == 0, result.output
    # allowance 10% of 50 = 5,00 €; spent 9,50 €
    assert "4,50 € over budget" in result.output


def test_cli_report_budget_from_environment(statement, categories, monkeypatch):
    monkeypatch.setenv("WALLET_PARSER_BUDGET", "200")
    result = runner.invoke(
        app, ["report", "--file", str(statement), "--categories", str(categories)]
    )
    assert result.exit_code == 0, result.output
    assert "over budget" not in result.output


def test_cli_report_missing_file(tmp_path, categories):
    result = runner.invoke(
        app,
        ["report", "--file", str(tmp_path / "nope.csv"), "--categories", str(categories)],
    )
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_cli_check_budgets(write_categories):
    ok = write_categories([{"label": "a", "budget": 40}, {"label": "b", "budget": 60}])
    result = runner.invoke(app, ["check-budgets", "--categories", str(ok)])
    assert result.exit_code == 0, result.output
    assert "Budget configuration OK" in result.output

    too_much = write_categories(
        [{"label": "a", "budget": 70}, {"label": "b", "budget": 40}], name="over.json"
    )
    result = runner.invoke(app, ["check-budgets", "--categories", str(too_much)])
    assert result.exit_code == 1
    assert "110%" in result.output


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (-9.5, "-9,50 €"),
        (1234.5, "1.234,50 €"),
        (0, "0,00 €"),
        (-1234567.891, "-1.234.567,89 €"),
    ],
)
def test_format_eur(amount, expected):
    assert format_eur(amount) == expected
