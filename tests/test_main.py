import csv
import json

import click
import pytest
from click.testing import CliRunner

from loan_payoff.main import build_params_from_options, cli, parse_amount

LOAN = ["-p", "300k", "-r", "6", "-t", "30", "-s", "2024-01"]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.parametrize("text, expected", [("500000", 500000.0), ("300k", 300000.0), ("1.5m", 1500000.0), ("1,200", 1200.0)])
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


def test_parse_amount_rejects_garbage():
    with pytest.raises(click.BadParameter):
        parse_amount("lots")


def test_build_params_from_options():
    params = build_params_from_options("300k", 6.0, 30.0, "200", "2024-01-15")

    assert params.principal == 300000
    assert params.extra_monthly_payment == 200
    assert params.start_date.isoformat() == "2024-01-15"


def test_schedule_command_prints_summary_and_rows(runner):
    result = runner.invoke(cli, ["schedule", *LOAN])

    assert result.exit_code == 0, result.output
    assert "$1,798.65" in result.output
    assert "30 years and 1 month" in result.output
    assert "showing first 120 rows" in result.output
    assert "02/01/2024" in result.output


def test_schedule_command_uses_selected_currency(runner):
    result = runner.invoke(cli, ["schedule", *LOAN, "--currency", "de-DE"])

    assert result.exit_code == 0, result.output
    assert "1.798,65 €" in result.output


def test_schedule_export_json(runner, tmp_path):
    path = tmp_path / "schedule.json"

    result = runner.invoke(cli, ["schedule", *LOAN, "--extra", "200", "--output", str(path)])

    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["summary"]["months_to_payoff"] == 279
    assert data["summary"]["monthly_payment"] == 1798.65
    assert len(data["schedule"]) == 279
    assert data["schedule"][0]["date"] == "2024-02-01"


def test_schedule_export_csv(runner, tmp_path):
    path = tmp_path / "schedule.csv"

    result = runner.invoke(cli, ["schedule", "-p", "12000", "-r", "0", "-t", "1", "-s", "2024-01", "--output", str(path)])

    assert result.exit_code == 0, result.output
    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Payment", "Date", "Interest", "Principal", "Remaining_Balance"]
    assert rows[1] == ["1", "2024-02-01", "0.00", "1000.00", "11000.00"]
    assert len(rows) == 13


def test_schedule_rejects_unknown_export_format(runner, tmp_path):
    result = runner.invoke(cli, ["schedule", *LOAN, "--output", str(tmp_path / "out.txt")])

    assert result.exit_code != 0


def test_summary_command(runner):
    result = runner.invoke(cli, ["summary", *LOAN, "-e", "200"])

    assert result.exit_code == 0, result.output
    assert "23 years and 3 months" in result.output
    assert "Interest saved" in result.output


def test_summary_export_json(runner, tmp_path):
    path = tmp_path / "summary.json"

    result = runner.invoke(cli, ["summary", *LOAN, "--output", str(path)])

    assert result.exit_code == 0, result.output
    assert json.loads(path.read_text(encoding="utf-8"))["summary"]["status"] == "paid_off"


def test_invalid_loan_is_reported(runner):
    result = runner.invoke(cli, ["summary", "-p", "0", "-r", "6", "-t", "30"])

    assert result.exit_code != 0
    assert "Invalid input" in result.output


def test_refinance_command(runner):
    result = runner.invoke(
        cli,
        ["refinance", *LOAN, "--new-principal", "300k", "--new-rate", "4", "--new-term", "30", "--closing-costs", "5000"],
    )

    assert result.exit_code == 0, result.output
    assert "Current monthly payment: $1,798.65" in result.output
    assert "$1,432.25" in result.output
    assert "$366.40" in result.output
    assert "You will break even in 1 year and 2 months." in result.output


def test_refinance_without_savings(runner):
    result = runner.invoke(
        cli,
        ["refinance", *LOAN, "--new-principal", "300k", "--new-rate", "7", "--new-term", "30"],
    )

    assert result.exit_code == 0, result.output
    assert "does not provide monthly savings" in result.output


def test_refinance_rejects_bad_new_loan(runner):
    result = runner.invoke(
        cli,
        ["refinance", *LOAN, "--new-principal", "0", "--new-rate", "4", "--new-term", "30"],
    )

    assert result.exit_code != 0
    assert "new loan principal" in result.output


def test_unreasonable_term_is_rejected(runner):
    result = runner.invoke(cli, ["summary", "-p", "300k", "-r", "6", "-t", "10000000"])

    assert result.exit_code != 0
    assert "must not exceed 100 years" in result.output
