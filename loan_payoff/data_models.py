"""Data models for the loan payoff calculator.

This module defines dataclasses representing the entities used by the
calculator: the loan parameters supplied by the user, individual payment
records of an amortization schedule, the overall amortization result and the
outcome of a refinance break-even analysis. All of them are frozen, so a
result can be handed to presentation code without fear of it being altered.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

PAID_OFF = "paid_off"
CAPPED = "capped"


@dataclass(frozen=True)
class LoanParameters:
    """Inputs of an amortization calculation.

    Attributes
    ----------
    principal: Decimal
        The amount borrowed.
    annual_rate: Decimal
        Nominal annual interest rate in percent (``6`` means 6 %).
    term_years: Decimal
        Loan term in years. Fractional terms are allowed.
    extra_monthly_payment: Decimal
        Additional principal paid every month on top of the standard payment.
    start_date: date
        Loan start date. ``None`` means today. The first payment falls on the
        first day of the following month.
    """

    principal: Decimal
    annual_rate: Decimal
    term_years: Decimal
    extra_monthly_payment: Decimal = Decimal("0")
    start_date: Optional[date] = None


@dataclass(frozen=True)
class PaymentRecord:
    """One month of an amortization schedule.

    ``principal_paid`` includes the extra payment for the month. All amounts
    are rounded to cents.
    """

    payment_number: int
    date: date
    interest_paid: Decimal
    principal_paid: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    """Outcome of simulating a loan month by month.

    ``monthly_payment`` is the standard (contractual) payment and does not
    include the extra payment. ``status`` is ``"paid_off"`` when the balance
    was cleared, or ``"capped"`` when the simulation stopped at twice the
    loan term with money still owed.
    """

    months_to_payoff: int
    total_interest_paid: Decimal
    total_interest_saved: Decimal
    monthly_payment: Decimal
    schedule: Tuple[PaymentRecord, ...]
    status: str = PAID_OFF  # "paid_off" or "capped"

    @property
    def is_paid_off(self) -> bool:
        return self.status == PAID_OFF

    @property
    def final_balance(self) -> Decimal:
        if not self.schedule:
            return Decimal("0.00")
        return self.schedule[-1].remaining_balance


@dataclass(frozen=True)
class RefinanceBreakEven:
    """Result of comparing a current monthly payment against a refinanced one.

    ``break_even_months`` is ``None`` when the new payment is not lower than
    the original one, in which case ``is_valid`` is False.
    ``total_savings_over_remaining_term`` is reserved and currently always
    ``None``.
    """

    break_even_months: Optional[Decimal]
    monthly_savings: Decimal
    total_savings_over_remaining_term: Optional[Decimal]
    is_valid: bool
