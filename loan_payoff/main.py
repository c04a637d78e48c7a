"""Command-line interface for the loan payoff calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute full amortization schedules, view summaries or
check whether refinancing pays off. Results can be printed to the terminal or
exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
from datetime import date
from pathlib import Path
from typing import Callable, Optional

import click

from . import config
from .data_models import AmortizationResult, LoanParameters
from .engine import compute_schedule
from .errors import InvalidInputError
from .formatter import (
    CURRENCY_FORMATS,
    format_currency,
    get_currency_format,
    print_break_even,
    print_schedule,
    print_summary,
    serialize_schedule,
    summary_to_dict,
)
from .refinance import analyze_refinance
from .utils import decimal_from_str, parse_date


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("500000") and shorthand with ``k``/``m`` suffixes
    (e.g., "500k" meaning 500_000). Returns a float.
    """
    value = value.strip().lower()
    value = value.replace(",", "")
    factor = 1.0
    if value.endswith("k"):
        factor = 1_000.0
        value = value[:-1]
    elif value.endswith("m"):
        factor = 1_000_000.0
        value = value[:-1]
    try:
        return float(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def build_params_from_options(
    principal: str,
    rate: float,
    term: float,
    extra: Optional[str] = None,
    start_date: Optional[str] = None,
) -> LoanParameters:
    if term > config.MAX_TERM_YEARS:
        raise click.BadParameter(f"Loan term must not exceed {config.MAX_TERM_YEARS} years")
    principal_value = decimal_from_str(str(parse_amount(principal)))
    extra_value = decimal_from_str(str(parse_amount(extra)) if extra else "0")
    start_dt: Optional[date] = None
    if start_date:
        try:
            start_dt = parse_date(start_date)
        except ValueError as exc:
            raise click.BadParameter(str(exc))
    return LoanParameters(
        principal=principal_value,
        annual_rate=decimal_from_str(str(rate)),
        term_years=decimal_from_str(str(term)),
        extra_monthly_payment=extra_value,
        start_date=start_dt,
    )


def export_to_json(path: Path, result: AmortizationResult) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary_to_dict(result), "schedule": serialize_schedule(result.schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, result: AmortizationResult) -> None:
    """Export schedule to a CSV file."""
    header = ["Payment", "Date", "Interest", "Principal", "Remaining_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for record in result.schedule:
            writer.writerow(
                [
                    record.payment_number,
                    record.date.isoformat(),
                    f"{record.interest_paid:.2f}",
                    f"{record.principal_paid:.2f}",
                    f"{record.remaining_balance:.2f}",
                ]
            )


def loan_options(func: Callable) -> Callable:
    """Attach the options describing the original loan to a command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount, e.g. 300k"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, type=float, help="Loan term in years"),
        click.option("--extra", "-e", "extra", help="Extra payment applied to principal every month"),
        click.option("--start-date", "-s", "start_date", help="Loan start date (YYYY-MM or YYYY-MM-DD), default today"),
        click.option(
            "--currency",
            "currency",
            type=click.Choice(sorted(CURRENCY_FORMATS)),
            default=config.DEFAULT_LOCALE,
            show_default=True,
            help="Locale used to display amounts",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run(params: LoanParameters) -> AmortizationResult:
    try:
        return compute_schedule(params)
    except InvalidInputError as exc:
        raise click.ClickException(str(exc))


@click.group()
@click.option("--log-level", "log_level", default=None, help="Logging level, e.g. DEBUG")
def cli(log_level: Optional[str]) -> None:
    """A command-line loan payoff and refinance calculator."""
    config.configure_logging(log_level)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: float,
    term: float,
    extra: Optional[str],
    start_date: Optional[str],
    currency: str,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    result = _run(build_params_from_options(principal, rate, term, extra, start_date))
    fmt = get_currency_format(currency)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(result, fmt)
    # Limit schedule length printed to avoid flooding the terminal
    max_rows = config.MAX_SCHEDULE_ROWS
    if len(result.schedule) > max_rows:
        click.echo(f"Schedule has {len(result.schedule)} rows; showing first {max_rows} rows.")
        print_schedule(result.schedule[:max_rows], fmt)
    else:
        print_schedule(result.schedule, fmt)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: float,
    term: float,
    extra: Optional[str],
    start_date: Optional[str],
    currency: str,
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    result = _run(build_params_from_options(principal, rate, term, extra, start_date))
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_to_dict(result)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result, get_currency_format(currency))


@cli.command()
@loan_options
@click.option("--new-principal", "new_principal", required=True, help="Principal of the new loan")
@click.option("--new-rate", "new_rate", required=True, type=float, help="Annual rate of the new loan (percent)")
@click.option("--new-term", "new_term", required=True, type=float, help="Term of the new loan in years")
@click.option("--closing-costs", "closing_costs", default="0", show_default=True, help="Refinance closing costs")
def refinance(
    principal: str,
    rate: float,
    term: float,
    extra: Optional[str],
    start_date: Optional[str],
    currency: str,
    new_principal: str,
    new_rate: float,
    new_term: float,
    closing_costs: str,
) -> None:
    """Check how long a refinance takes to pay back its closing costs.

    The current loan is described with the usual loan options; its standard
    monthly payment is compared with that of the new loan, for example:

        loan-payoff refinance -p 300k -r 7 -t 30 --new-principal 290k --new-rate 5.5 --new-term 30 --closing-costs 4000
    """
    fmt = get_currency_format(currency)
    original = _run(build_params_from_options(principal, rate, term, extra, start_date))
    try:
        new_payment, break_even = analyze_refinance(
            original.monthly_payment,
            decimal_from_str(str(parse_amount(new_principal))),
            decimal_from_str(str(new_rate)),
            decimal_from_str(str(new_term)),
            decimal_from_str(str(parse_amount(closing_costs))),
        )
    except InvalidInputError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Current monthly payment: {format_currency(original.monthly_payment, fmt)}")
    print_break_even(new_payment, break_even, fmt)


if __name__ == "__main__":
    cli()
