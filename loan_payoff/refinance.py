"""Refinance break-even analysis.

Refinancing trades an upfront closing cost for a lower monthly payment. The
break-even point is the number of months after which the accumulated monthly
savings have paid back the closing costs.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Tuple

from .data_models import RefinanceBreakEven
from .engine import compute_standard_payment
from .errors import InvalidInputError
from .utils import Number, round_currency, to_decimal

logger = logging.getLogger(__name__)


def compute_break_even(
    original_monthly_payment: Number,
    new_monthly_payment: Number,
    closing_costs: Number,
) -> RefinanceBreakEven:
    """Return the monthly savings and break-even month count of a refinance.

    When the new payment is not lower than the original one the refinance
    never pays off: ``break_even_months`` is ``None``, ``is_valid`` is False
    and ``monthly_savings`` keeps its (unrounded) non-positive value.

    Raises
    ------
    InvalidInputError
        If the original payment is not positive, or the new payment or the
        closing costs are negative.
    """
    original = to_decimal(original_monthly_payment, "original monthly payment")
    new = to_decimal(new_monthly_payment, "new monthly payment")
    costs = to_decimal(closing_costs, "closing costs")
    if original <= 0 or new < 0 or costs < 0:
        raise InvalidInputError(
            "Invalid input: Monthly payments must be positive and closing costs must be non-negative"
        )

    monthly_savings = original - new
    if monthly_savings <= 0:
        logger.debug("No monthly savings (%s); refinance never breaks even", monthly_savings)
        return RefinanceBreakEven(
            break_even_months=None,
            monthly_savings=monthly_savings,
            total_savings_over_remaining_term=None,
            is_valid=False,
        )

    break_even_months = round_currency(costs / monthly_savings)
    logger.debug("Saving %s per month, break even after %s months", monthly_savings, break_even_months)
    return RefinanceBreakEven(
        break_even_months=break_even_months,
        monthly_savings=round_currency(monthly_savings),
        total_savings_over_remaining_term=None,
        is_valid=True,
    )


def analyze_refinance(
    original_monthly_payment: Optional[Number],
    new_principal: Number,
    new_annual_rate: Number,
    new_term_years: Number,
    closing_costs: Number,
) -> Tuple[Decimal, RefinanceBreakEven]:
    """Price a new loan and compare it against the current monthly payment.

    ``original_monthly_payment`` is normally the standard payment of a loan
    computed earlier with :func:`loan_payoff.engine.compute_amortization`.

    Returns
    -------
    new_payment: Decimal
        Standard monthly payment of the new loan.
    break_even: RefinanceBreakEven
        Result of :func:`compute_break_even`.
    """
    if original_monthly_payment is None or to_decimal(original_monthly_payment, "original monthly payment") <= 0:
        raise InvalidInputError("Please calculate your original loan first using the Loan Calculator tab.")
    principal = to_decimal(new_principal, "new loan principal")
    rate = to_decimal(new_annual_rate, "new loan interest rate")
    term = to_decimal(new_term_years, "new loan term")
    if principal <= 0 or rate < 0 or term <= 0:
        raise InvalidInputError(
            "Please enter valid values for the new loan principal, interest rate, and term."
        )

    new_payment = compute_standard_payment(principal, rate, term)
    return new_payment, compute_break_even(original_monthly_payment, new_payment, closing_costs)
