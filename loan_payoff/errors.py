"""Exceptions raised by the loan payoff calculator."""


class InvalidInputError(ValueError):
    """Raised when loan or refinance inputs fail validation.

    Validation happens before any computation starts, so a raised error never
    comes with a partial result.
    """
