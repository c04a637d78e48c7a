from decimal import Decimal

import pytest

from loan_payoff.errors import InvalidInputError
from loan_payoff.refinance import analyze_refinance, compute_break_even


def test_break_even_known_case():
    result = compute_break_even(2000, 1700, 3000)

    assert result.monthly_savings == Decimal("300.00")
    assert result.break_even_months == Decimal("10.00")
    assert result.is_valid
    assert result.total_savings_over_remaining_term is None


def test_break_even_is_rounded_to_two_decimals():
    result = compute_break_even(1000, 700, 1000)

    assert result.break_even_months == Decimal("3.33")


def test_no_closing_costs_breaks_even_immediately():
    result = compute_break_even(1500, 1400, 0)

    assert result.break_even_months == 0
    assert result.is_valid


@pytest.mark.parametrize("original, new", [(1700, 2000), (1500, 1500), ("1500.004", "1500.005")])
def test_no_savings_never_breaks_even(original, new):
    result = compute_break_even(original, new, 3000)

    assert not result.is_valid
    assert result.break_even_months is None
    assert result.total_savings_over_remaining_term is None
    assert result.monthly_savings <= 0


def test_negative_savings_keep_their_unrounded_value():
    result = compute_break_even("1500.004", "1500.005", 3000)

    assert result.monthly_savings == Decimal("-0.001")


@pytest.mark.parametrize("original, new, costs", [(0, 100, 0), (-5, 100, 0), (100, -1, 0), (100, 50, -1)])
def test_invalid_input_is_rejected(original, new, costs):
    with pytest.raises(InvalidInputError):
        compute_break_even(original, new, costs)


def test_analyze_refinance_prices_new_loan():
    new_payment, result = analyze_refinance(Decimal("1798.65"), 300000, 4, 30, 5000)

    assert new_payment == Decimal("1432.25")
    assert result.monthly_savings == Decimal("366.40")
    assert result.break_even_months == Decimal("13.65")
    assert result.is_valid


def test_analyze_refinance_accepts_payment_stored_as_text():
    new_payment, result = analyze_refinance("1798.65", 300000, 4, 30, 5000)

    assert new_payment == Decimal("1432.25")
    assert result.is_valid


@pytest.mark.parametrize("original", [None, 0, "0.00"])
def test_analyze_refinance_requires_original_loan(original):
    with pytest.raises(InvalidInputError, match="original loan first"):
        analyze_refinance(original, 300000, 4, 30, 5000)


@pytest.mark.parametrize("principal, rate, term", [(0, 4, 30), (300000, -1, 30), (300000, 4, 0)])
def test_analyze_refinance_rejects_bad_new_loan(principal, rate, term):
    with pytest.raises(InvalidInputError, match="new loan principal"):
        analyze_refinance(Decimal("1798.65"), principal, rate, term, 5000)
