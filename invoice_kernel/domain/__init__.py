"""
Pure domain layer.

Decimal money helpers, calculation error kinds and the clock abstraction.
No dependencies on configuration, presentation or I/O.
"""

from invoice_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from invoice_kernel.domain.error_kinds import CalculationErrorKind
from invoice_kernel.domain.values import (
    CENT,
    MONEY_TOLERANCE,
    ONE_HUNDRED,
    ZERO,
    percent_of,
    round_half_away,
    round_money,
    to_decimal,
)

__all__ = [
    "CENT",
    "CalculationErrorKind",
    "Clock",
    "DeterministicClock",
    "MONEY_TOLERANCE",
    "ONE_HUNDRED",
    "SystemClock",
    "ZERO",
    "percent_of",
    "round_half_away",
    "round_money",
    "to_decimal",
]
