"""Output helpers for the loan payoff calculator.

This module turns calculation results into text: currency amounts, payoff and
break-even durations, dates, chart series and simple terminal tables. None of
these helpers change the numbers they display.

Currency display is driven by an explicit :class:`CurrencyFormat` passed to
every function that needs one; there is no module-level "current locale".
Only the symbol and number layout change with the locale, amounts are never
converted between currencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Sequence

from .data_models import AmortizationResult, PaymentRecord, RefinanceBreakEven
from .utils import Number, to_decimal

# Schedules longer than this are charted per year instead of per payment.
CHART_AGGREGATION_THRESHOLD = 60

NO_SAVINGS_MESSAGE = (
    "Refinancing does not provide monthly savings. The new monthly payment is "
    "equal to or higher than your current payment."
)


@dataclass(frozen=True)
class CurrencyFormat:
    """How to display amounts for one locale.

    Attributes
    ----------
    locale: str
        Locale code, e.g. ``"en-US"``.
    currency: str
        ISO currency code shown alongside the symbol in selectors.
    symbol: str
        Currency symbol.
    symbol_first: bool
        ``True`` for ``$1.00``, ``False`` for ``1,00 €``.
    group_separator, decimal_separator: str
        Thousands and decimal separators.
    grouping: str
        ``"western"`` groups digits by three, ``"indian"`` groups the last
        three digits and then by two (``12,34,567``).
    """

    locale: str
    currency: str
    symbol: str
    symbol_first: bool = True
    group_separator: str = ","
    decimal_separator: str = "."
    grouping: str = "western"


CURRENCY_FORMATS: Dict[str, CurrencyFormat] = {
    "en-US": CurrencyFormat("en-US", "USD", "$"),
    "de-DE": CurrencyFormat("de-DE", "EUR", "€", symbol_first=False, group_separator=".", decimal_separator=","),
    "en-GB": CurrencyFormat("en-GB", "GBP", "£"),
    "en-IN": CurrencyFormat("en-IN", "INR", "₹", grouping="indian"),
    "ja-JP": CurrencyFormat("ja-JP", "JPY", "¥"),
}

DEFAULT_LOCALE = "en-US"


def get_currency_format(locale: str | None) -> CurrencyFormat:
    """Return the format for ``locale``, falling back to US dollars."""
    return CURRENCY_FORMATS.get(locale or DEFAULT_LOCALE, CURRENCY_FORMATS[DEFAULT_LOCALE])


def _group_digits(digits: str, fmt: CurrencyFormat) -> str:
    if fmt.grouping == "indian" and len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        return fmt.group_separator.join(pairs + [tail])
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return fmt.group_separator.join(groups)


def format_currency(amount: Number, fmt: CurrencyFormat, decimals: int = 2) -> str:
    """Format ``amount`` for display, e.g. ``$1,234.56`` or ``1.234,56 €``."""
    value = to_decimal(amount, "amount").quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    whole, _, fraction = f"{abs(value):f}".partition(".")
    number = _group_digits(whole, fmt)
    if decimals > 0:
        number = f"{number}{fmt.decimal_separator}{fraction}"
    text = f"{fmt.symbol}{number}" if fmt.symbol_first else f"{number} {fmt.symbol}"
    return f"-{text}" if value < 0 else text


def _plural(count: int, unit: str) -> str:
    return f"1 {unit}" if count == 1 else f"{count} {unit}s"


def format_payoff_time(total_months: int) -> str:
    """Convert a month count to text such as ``"5 years and 3 months"``."""
    years, months = divmod(int(total_months), 12)
    if years == 0:
        return _plural(months, "month")
    if months == 0:
        return _plural(years, "year")
    return f"{_plural(years, 'year')} and {_plural(months, 'month')}"


def format_break_even_time(break_even_months: Number) -> str:
    """Convert a fractional month count to a readable duration.

    Leftover months are rounded to the nearest whole month; a break-even point
    under half a month is expressed in days, counting 30 days per month.
    """
    value = to_decimal(break_even_months, "break-even months")
    years = int(value // 12)
    months = int((value % 12).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if months == 12:
        years += 1
        months = 0
    if years > 0 and months > 0:
        return f"{_plural(years, 'year')} and {_plural(months, 'month')}"
    if years > 0:
        return _plural(years, "year")
    if months > 0:
        return _plural(months, "month")
    days = int((value * 30).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return _plural(days, "day")


def break_even_message(result: RefinanceBreakEven) -> str:
    if not result.is_valid or result.break_even_months is None:
        return NO_SAVINGS_MESSAGE
    return f"You will break even in {format_break_even_time(result.break_even_months)}."


def format_date(value: date) -> str:
    """Format a date as ``MM/DD/YYYY``."""
    return value.strftime("%m/%d/%Y")


def chart_series(schedule: Sequence[PaymentRecord], fmt: CurrencyFormat) -> Dict[str, Any]:
    """Build the data behind the balance/principal/interest chart.

    Schedules longer than five years are aggregated per year: principal and
    interest are summed and the balance is the last one of the year.
    """
    labels: List[str] = []
    balance: List[float] = []
    principal: List[float] = []
    interest: List[float] = []

    aggregate = len(schedule) > CHART_AGGREGATION_THRESHOLD
    if aggregate:
        years: Dict[int, Dict[str, Decimal]] = {}
        for record in schedule:
            year = (record.payment_number - 1) // 12
            bucket = years.setdefault(year, {"principal": Decimal("0"), "interest": Decimal("0")})
            bucket["principal"] += record.principal_paid
            bucket["interest"] += record.interest_paid
            bucket["balance"] = record.remaining_balance
        for year, bucket in years.items():
            labels.append(f"Year {year + 1}")
            balance.append(float(bucket["balance"]))
            principal.append(float(bucket["principal"]))
            interest.append(float(bucket["interest"]))
    else:
        for record in schedule:
            labels.append(f"Payment {record.payment_number}")
            balance.append(float(record.remaining_balance))
            principal.append(float(record.principal_paid))
            interest.append(float(record.interest_paid))

    return {
        "labels": labels,
        "balance": balance,
        "principal": principal,
        "interest": interest,
        "x_title": "Year" if aggregate else "Payment Number",
        "balance_title": f"Remaining Balance ({fmt.symbol})",
        "paid_title": f"Amount Paid ({fmt.symbol})",
    }


def serialize_schedule(schedule: Iterable[PaymentRecord]) -> List[Dict[str, Any]]:
    """Convert payment records into JSON-serialisable dictionaries."""
    return [
        {
            "payment_number": record.payment_number,
            "date": record.date.isoformat(),
            "interest_paid": float(record.interest_paid),
            "principal_paid": float(record.principal_paid),
            "remaining_balance": float(record.remaining_balance),
        }
        for record in schedule
    ]


def summary_to_dict(result: AmortizationResult) -> Dict[str, Any]:
    return {
        "monthly_payment": float(result.monthly_payment),
        "months_to_payoff": result.months_to_payoff,
        "payoff_time": format_payoff_time(result.months_to_payoff),
        "total_interest_paid": float(result.total_interest_paid),
        "total_interest_saved": float(result.total_interest_saved),
        "status": result.status,
    }


def print_summary(result: AmortizationResult, fmt: CurrencyFormat) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Monthly payment    : {format_currency(result.monthly_payment, fmt)}")
    print(f"Payoff time        : {format_payoff_time(result.months_to_payoff)}")
    print(f"Total interest     : {format_currency(result.total_interest_paid, fmt)}")
    print(f"Interest saved     : {format_currency(result.total_interest_saved, fmt)}")
    if not result.is_paid_off:
        print(f"Unpaid balance     : {format_currency(result.final_balance, fmt)}")
    print("-" * 72)


def print_schedule(schedule: Iterable[PaymentRecord], fmt: CurrencyFormat) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Payment", "Date", "Interest", "Principal", "Balance"]
    print("\t".join(headers))
    for record in schedule:
        row = [
            str(record.payment_number),
            format_date(record.date),
            format_currency(record.interest_paid, fmt),
            format_currency(record.principal_paid, fmt),
            format_currency(record.remaining_balance, fmt),
        ]
        print("\t".join(row))


def print_break_even(new_payment: Decimal, result: RefinanceBreakEven, fmt: CurrencyFormat) -> None:
    """Print the outcome of a refinance analysis."""
    print("Refinance")
    print("=" * 72)
    print(f"New monthly payment: {format_currency(new_payment, fmt)}")
    print(f"Monthly savings    : {format_currency(result.monthly_savings, fmt)}")
    print(break_even_message(result))
    print("=" * 72)
