"""
Values -- Decimal money helpers for invoice arithmetic.

Responsibility:
    Coerces caller input into ``Decimal`` and provides the rounding
    primitives used by every calculator.  Amounts are plain, currency-neutral
    ``Decimal`` values; currency presentation is a host concern.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted through ``str`` so a
      binary artefact such as ``0.1 + 0.2`` never leaks into a total.
    - Monetary rounding is half away from zero (``ROUND_HALF_UP`` in the
      ``decimal`` module), never banker's rounding.

Failure modes:
    - InvalidAmountError from ``to_decimal`` for None, booleans, NaN,
      infinities and unparseable strings.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from invoice_kernel.exceptions import InvalidAmountError

ZERO = Decimal("0")
CENT = Decimal("0.01")
ONE_HUNDRED = Decimal("100")

# Rounding tolerance for the net-total closure check.
MONEY_TOLERANCE = Decimal("0.01")


def to_decimal(value: Any, name: str = "amount") -> Decimal:
    """
    Convert a caller-supplied number into a finite Decimal.

    Accepts Decimal, int, float and numeric strings.

    Raises:
        InvalidAmountError: if the value is not a finite number.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(name, value)

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise InvalidAmountError(name, value) from exc
    else:
        raise InvalidAmountError(name, value)

    if not result.is_finite():
        raise InvalidAmountError(name, value)
    return result


def round_half_away(value: Decimal, exponent: Decimal = CENT) -> Decimal:
    """Round to ``exponent`` with ties going away from zero."""
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def round_money(value: Decimal) -> Decimal:
    """Round to the cent, half away from zero."""
    return round_half_away(value, CENT)


def percent_of(amount: Decimal, percent: Decimal) -> Decimal:
    """Unrounded ``percent`` percent of ``amount``."""
    return amount * percent / ONE_HUNDRED
