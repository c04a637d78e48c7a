"""Core calculation engine for the loan payoff calculator.

This module implements the financial logic required to build amortization
schedules for fixed-rate, monthly-paid loans. It supports a constant extra
monthly payment and reports how much interest it saves compared with paying
only the standard installment. Results are returned as an
``AmortizationResult`` holding the schedule and its summary metrics.

Balances are kept as a cents ledger: the remaining balance is rounded to cents
every month and the rounded value is what accrues interest the next month.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import List, Optional

from .data_models import (
    CAPPED,
    PAID_OFF,
    AmortizationResult,
    LoanParameters,
    PaymentRecord,
)
from .errors import InvalidInputError
from .utils import Number, add_months, first_of_month, round_currency, to_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

# Balances at or below one cent count as paid off.
PAYOFF_TOLERANCE = Decimal("0.01")

# The simulation never runs longer than this many times the loan term.
SAFETY_CAP_FACTOR = 2


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: Decimal) -> Decimal:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``; so does a rate too small to move
    ``(1 + i)^n`` away from 1 at the current decimal precision. The result is
    not rounded.
    """
    if rate_per_month == 0:
        return principal / term
    factor = (1 + rate_per_month) ** term
    if factor == 1:
        return principal / term
    return principal * (rate_per_month * factor) / (factor - 1)


def compute_standard_payment(principal: Number, annual_rate: Number, term_years: Number) -> Decimal:
    """Return the standard monthly payment, rounded to cents.

    Unlike :func:`compute_amortization` this helper does not raise on a
    non-positive principal or term, or on a negative rate; it returns zero
    instead so refinance forms can call it with incomplete values.

    >>> compute_standard_payment(300000, 6, 30)
    Decimal('1798.65')
    """
    principal = to_decimal(principal, "principal")
    annual_rate = to_decimal(annual_rate, "annual rate")
    term_years = to_decimal(term_years, "term")
    if principal <= 0 or term_years <= 0 or annual_rate < 0:
        return Decimal("0.00")
    rate_per_month = annual_rate / Decimal(100) / Decimal(12)
    total_months = term_years * 12
    return round_currency(_calculate_annuity_payment(principal, rate_per_month, total_months))


def _validate(principal: Decimal, annual_rate: Decimal, term_years: Decimal, extra: Decimal) -> None:
    if principal <= 0 or annual_rate < 0 or term_years <= 0 or extra < 0:
        raise InvalidInputError(
            "Invalid input: All values must be positive (or zero for extra payment)"
        )


def compute_amortization(
    principal: Number,
    annual_rate: Number,
    term_years: Number,
    extra_monthly_payment: Number = 0,
    start_date: Optional[date] = None,
) -> AmortizationResult:
    """Simulate a loan month by month and return its schedule and summary.

    Parameters
    ----------
    principal: Number
        The amount borrowed. Must be positive.
    annual_rate: Number
        Nominal annual rate in percent. Zero is allowed.
    term_years: Number
        Loan term in years. Must be positive.
    extra_monthly_payment: Number
        Extra principal paid each month. Must not be negative.
    start_date: date
        Loan start date, today when omitted. Payment ``n`` is dated on the
        first day of the ``n``-th month after the start month.

    Returns
    -------
    AmortizationResult
        The schedule and its summary. When the balance is still above one
        cent after twice the loan term, the schedule stops there and the
        result's ``status`` is ``"capped"``.

    Raises
    ------
    InvalidInputError
        If any input is out of range or not a number.
    """
    principal = to_decimal(principal, "principal")
    annual_rate = to_decimal(annual_rate, "annual rate")
    term_years = to_decimal(term_years, "term")
    extra = to_decimal(extra_monthly_payment, "extra monthly payment")
    _validate(principal, annual_rate, term_years, extra)

    if start_date is None:
        start_date = date.today()

    rate_per_month = annual_rate / Decimal(100) / Decimal(12)
    total_months = term_years * 12
    monthly_payment = compute_standard_payment(principal, annual_rate, term_years)
    logger.debug(
        "Standard payment %s for principal=%s rate=%s%% term=%sy",
        monthly_payment,
        principal,
        annual_rate,
        term_years,
    )

    # Baseline used only for the savings comparison
    total_interest_without_extra = monthly_payment * total_months - principal

    balance = principal
    total_interest_paid = Decimal("0")
    month = 0
    max_months = total_months * SAFETY_CAP_FACTOR
    base_date = first_of_month(start_date)
    schedule: List[PaymentRecord] = []

    while balance > PAYOFF_TOLERANCE and month < max_months:
        month += 1
        interest_payment = balance * rate_per_month
        total_interest_paid += interest_payment
        principal_payment = monthly_payment - interest_payment + extra

        balance -= principal_payment
        remaining_balance = balance
        if balance < 0:
            # The final payment overshoots what was owed
            overpayment = -balance
            total_interest_paid = max(Decimal("0"), total_interest_paid - overpayment)
            remaining_balance = Decimal("0")
        remaining_balance = round_currency(remaining_balance)

        schedule.append(
            PaymentRecord(
                payment_number=month,
                date=add_months(base_date, month),
                interest_paid=round_currency(interest_payment),
                principal_paid=round_currency(principal_payment),
                remaining_balance=remaining_balance,
            )
        )
        balance = remaining_balance

    status = PAID_OFF
    if balance > PAYOFF_TOLERANCE:
        status = CAPPED
        logger.warning(
            "Schedule stopped after %d months with %s still owed (safety cap)",
            month,
            balance,
        )

    total_interest_paid = round_currency(total_interest_paid)
    total_interest_saved = round_currency(
        max(Decimal("0"), total_interest_without_extra - total_interest_paid)
    )
    logger.debug(
        "Loan paid in %d months, interest %s, saved %s",
        month,
        total_interest_paid,
        total_interest_saved,
    )

    return AmortizationResult(
        months_to_payoff=month,
        total_interest_paid=total_interest_paid,
        total_interest_saved=total_interest_saved,
        monthly_payment=monthly_payment,
        schedule=tuple(schedule),
        status=status,
    )


def compute_schedule(params: LoanParameters) -> AmortizationResult:
    """Run :func:`compute_amortization` for a ``LoanParameters`` value."""
    return compute_amortization(
        params.principal,
        params.annual_rate,
        params.term_years,
        params.extra_monthly_payment,
        params.start_date,
    )
