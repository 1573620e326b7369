"""
Tax Engine - Calculate invoice tax under a selectable rounding policy.

Pure function with no I/O.  Rates are percentage points (14 means 14%).

Usage:
    from decimal import Decimal
    from invoice_engines.tax import calculate_tax
    from invoice_engines.types import RoundingMode

    result = calculate_tax(Decimal("33.33"), Decimal("14"), RoundingMode.TO_NEAREST_5)
    print(result.tax_amount)  # 4.65
    print(result.details.rounding_difference)  # -0.0162
"""

from __future__ import annotations

import time
from collections.abc import Callable
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal

from invoice_engines.tracer import traced_engine
from invoice_engines.types import RoundingMode, TaxDetails, TaxResult
from invoice_kernel.domain.error_kinds import CalculationErrorKind
from invoice_kernel.domain.values import (
    CENT,
    ONE_HUNDRED,
    ZERO,
    percent_of,
    round_half_away,
    to_decimal,
)
from invoice_kernel.exceptions import InvalidAmountError, describe_fault
from invoice_kernel.logging_config import get_logger

logger = get_logger("engines.tax")

_UNIT = Decimal("1")
_TWENTY = Decimal("20")
_TEN = Decimal("10")


def _round_to_fraction(raw: Decimal, steps_per_unit: Decimal) -> Decimal:
    """Round to the nearest 1/steps_per_unit, half away from zero."""
    return (round_half_away(raw * steps_per_unit, _UNIT) / steps_per_unit).quantize(CENT)


_ROUNDING_POLICIES: dict[RoundingMode, Callable[[Decimal], Decimal]] = {
    RoundingMode.NORMAL: lambda raw: round_half_away(raw, CENT),
    RoundingMode.ROUND_UP: lambda raw: raw.quantize(CENT, rounding=ROUND_CEILING),
    RoundingMode.ROUND_DOWN: lambda raw: raw.quantize(CENT, rounding=ROUND_FLOOR),
    RoundingMode.TO_NEAREST_5: lambda raw: _round_to_fraction(raw, _TWENTY),
    RoundingMode.TO_NEAREST_10: lambda raw: _round_to_fraction(raw, _TEN),
}

_missing = set(RoundingMode) - set(_ROUNDING_POLICIES)
if _missing:
    raise RuntimeError(f"No rounding policy for: {sorted(m.value for m in _missing)}")


def apply_rounding(raw_amount: Decimal, rounding_mode: RoundingMode) -> Decimal:
    """Round a raw tax amount with the given policy."""
    return _ROUNDING_POLICIES[rounding_mode](raw_amount)


class TaxCalculator:
    """
    Calculate tax on a base amount.

    Contract:
        Never raises for bad numbers; non-numeric input yields an
        ``INVALID_AMOUNT`` result and an amount too large to round to the
        cent yields ``INVALID_CALCULATION``.  An unknown rounding mode is a
        configuration error and raises ``InvalidRoundingModeError``.
    Guarantees:
        - A base or rate of zero or less yields zero tax, valid.
        - ``details`` records raw amount, rounded amount, the rounding
          difference and the effective rate for every non-zero tax.
        - ``total_including_tax`` is base plus rounded tax.
    """

    @traced_engine(
        "tax", "1.0",
        fingerprint_fields=("base_amount", "tax_rate", "rounding_mode"),
    )
    def calculate(
        self,
        base_amount: Decimal,
        tax_rate: Decimal,
        rounding_mode: RoundingMode | str = RoundingMode.NORMAL,
    ) -> TaxResult:
        """
        Calculate tax for an amount.

        Args:
            base_amount: Taxable amount.
            tax_rate: Rate in percentage points.
            rounding_mode: Policy used to round the raw tax.

        Returns:
            TaxResult with the rounded tax and its audit details.

        Raises:
            InvalidRoundingModeError: If ``rounding_mode`` is not a known policy.
        """
        mode = RoundingMode.parse(rounding_mode)

        try:
            base = to_decimal(base_amount, "base_amount")
            rate = to_decimal(tax_rate, "tax_rate")
        except InvalidAmountError as exc:
            logger.info("tax_invalid_amount", extra={
                "field_name": exc.field_name,
                "value": exc.value,
            })
            return TaxResult.error(CalculationErrorKind.INVALID_AMOUNT, str(exc))

        if base <= ZERO or rate <= ZERO:
            logger.debug("tax_not_applicable", extra={
                "base_amount": str(base),
                "tax_rate": str(rate),
            })
            return TaxResult()

        t0 = time.monotonic()
        try:
            raw_tax = percent_of(base, rate)
            rounded_tax = apply_rounding(raw_tax, mode)

            details = TaxDetails(
                base_amount=base,
                tax_rate=rate,
                raw_tax_amount=raw_tax,
                rounded_tax_amount=rounded_tax,
                rounding_difference=rounded_tax - raw_tax,
                effective_tax_rate=rounded_tax / base * ONE_HUNDRED,
            )
        except ArithmeticError as exc:
            logger.exception("tax_calculation_failed", extra={
                "base_amount": str(base),
                "tax_rate": str(rate),
                "rounding_mode": mode.value,
            })
            return TaxResult.error(
                CalculationErrorKind.INVALID_CALCULATION,
                f"Calculation error: {describe_fault(exc)}",
            )

        logger.debug("tax_calculation_completed", extra={
            "base_amount": str(base),
            "tax_rate": str(rate),
            "rounding_mode": mode.value,
            "raw_tax_amount": str(raw_tax),
            "tax_amount": str(rounded_tax),
            "rounding_difference": str(details.rounding_difference),
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        })

        return TaxResult(
            tax_amount=rounded_tax,
            total_including_tax=base + rounded_tax,
            details=details,
            is_valid=rounded_tax >= ZERO,
        )


_default_calculator = TaxCalculator()


def calculate_tax(
    base_amount: Decimal,
    tax_rate: Decimal,
    rounding_mode: RoundingMode | str = RoundingMode.NORMAL,
) -> TaxResult:
    """Module-level shortcut for ``TaxCalculator().calculate``."""
    return _default_calculator.calculate(base_amount, tax_rate, rounding_mode)
