"""
Typed exception hierarchy for the invoice calculation engine.

Calculation rules never raise: a bad percentage, an overflowing discount or
a zero quantity comes back as an invalid result tagged with a
``CalculationErrorKind``.  The exceptions below cover the remaining cases,
which are host-side problems:

    InvoiceCalculationError (base)
    |
    +-- InvalidAmountError          INVALID_AMOUNT
    |
    +-- ConfigurationError          CONFIGURATION_ERROR
        +-- InvalidRoundingModeError    INVALID_ROUNDING_MODE

Every subclass has a ``code`` class attribute (machine-readable, API-safe)
and stores its context as attributes so the structured log formatter can
emit them as fields.
"""

from typing import Any


class InvoiceCalculationError(Exception):
    """Base exception for all invoice calculation errors."""

    code: str = "INVOICE_CALCULATION_ERROR"


class InvalidAmountError(InvoiceCalculationError):
    """
    A value could not be coerced into a finite Decimal.

    Raised by ``to_decimal``; engine entry points catch it and return an
    ``INVALID_AMOUNT`` result instead of propagating.
    """

    code: str = "INVALID_AMOUNT"

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = repr(value)
        super().__init__(f"{field_name} is not a valid amount: {value!r}")


class ConfigurationError(InvoiceCalculationError):
    """Calculation settings are missing a key or hold an invalid value."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, message: str, key: str | None = None, source: str | None = None):
        self.key = key
        self.source = source
        super().__init__(message)


class InvalidRoundingModeError(ConfigurationError):
    """Rounding mode name does not match any supported policy."""

    code: str = "INVALID_ROUNDING_MODE"

    def __init__(self, value: Any, source: str | None = None):
        self.value = repr(value)
        super().__init__(
            f"Unknown rounding mode: {value!r}",
            key="rounding_mode",
            source=source,
        )


def describe_fault(exc: BaseException) -> str:
    """
    Short, display-safe description of an unexpected fault.

    ``decimal`` signals stringify as a list of classes, so arithmetic
    faults are described by their type name.
    """
    text = str(exc)
    if isinstance(exc, ArithmeticError) or not text:
        return type(exc).__name__
    return text
