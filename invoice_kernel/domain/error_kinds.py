"""
Error kinds carried by calculation results.

Domain-rule violations never raise; they surface as an invalid result
tagged with one of these kinds.  The value doubles as the machine code
shown to API consumers and written to logs.
"""

from enum import Enum, unique


@unique
class CalculationErrorKind(str, Enum):
    """Typed reason a calculation result is invalid."""

    INVALID_LINE_INPUT = "INVALID_LINE_INPUT"
    """Quantity is not positive or unit price is negative."""

    INVALID_DISCOUNT_PERCENTAGE = "INVALID_DISCOUNT_PERCENTAGE"
    """Percentage discount above 100."""

    DISCOUNT_EXCEEDS_BASE = "DISCOUNT_EXCEEDS_BASE"
    """Fixed discount larger than the amount it is applied to."""

    NEGATIVE_DISCOUNT = "NEGATIVE_DISCOUNT"
    """Discount amount below zero."""

    INVALID_AMOUNT = "INVALID_AMOUNT"
    """An input could not be read as a finite number."""

    INVALID_CALCULATION = "INVALID_CALCULATION"
    """Catch-all for a failed invariant or an unexpected fault."""

    @property
    def default_message(self) -> str:
        return _DEFAULT_MESSAGES[self]


_DEFAULT_MESSAGES: dict[CalculationErrorKind, str] = {
    CalculationErrorKind.INVALID_LINE_INPUT: "Invalid quantity or unit price",
    CalculationErrorKind.INVALID_DISCOUNT_PERCENTAGE: "Discount percentage cannot exceed 100%",
    CalculationErrorKind.DISCOUNT_EXCEEDS_BASE: "Discount exceeds the base amount",
    CalculationErrorKind.NEGATIVE_DISCOUNT: "Discount cannot be negative",
    CalculationErrorKind.INVALID_AMOUNT: "Amount is not a valid number",
    CalculationErrorKind.INVALID_CALCULATION: "Invoice calculation failed",
}
