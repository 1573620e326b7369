"""
Discount Engine - Apply one percentage or fixed discount to a base amount.

Pure function with no I/O.  Used by the line calculator and directly by
editing hosts that preview a discount before committing it.

Usage:
    from decimal import Decimal
    from invoice_engines.discount import calculate_discount

    result = calculate_discount(Decimal("100"), Decimal("10"), is_percentage=True)
    print(result.discount_value)  # 10.00
    print(result.net_amount)  # 90.00
"""

from __future__ import annotations

from decimal import Decimal

from invoice_engines.tracer import traced_engine
from invoice_engines.types import DiscountResult
from invoice_kernel.domain.error_kinds import CalculationErrorKind
from invoice_kernel.domain.values import ONE_HUNDRED, ZERO, percent_of, round_money, to_decimal
from invoice_kernel.exceptions import InvalidAmountError, describe_fault
from invoice_kernel.logging_config import get_logger

logger = get_logger("engines.discount")


class DiscountCalculator:
    """
    Apply a single discount to a base amount.

    Contract:
        Never raises for bad numbers.  A rejected discount comes back as
        ``DiscountResult.error`` with a typed ``error_kind``; an amount too
        large for Decimal arithmetic comes back as ``INVALID_CALCULATION``.
    Guarantees:
        - A base of zero or less yields a zero, valid discount.
        - Percentage discounts are rounded to the cent, half away from zero.
        - Fixed discounts are used as given, never clamped.
    Non-goals:
        - Does not decide whether a discount is authorised.
    """

    @traced_engine(
        "discount", "1.0",
        fingerprint_fields=("base_amount", "discount_amount", "is_percentage"),
    )
    def calculate(
        self,
        base_amount: Decimal,
        discount_amount: Decimal,
        is_percentage: bool = False,
    ) -> DiscountResult:
        """
        Calculate the discount on ``base_amount``.

        Args:
            base_amount: Amount the discount applies to.
            discount_amount: Percentage points or a fixed amount.
            is_percentage: True if ``discount_amount`` is a percentage.

        Returns:
            DiscountResult with value, effective percentage and net amount.
        """
        try:
            base = to_decimal(base_amount, "base_amount")
            amount = to_decimal(discount_amount, "discount_amount")
        except InvalidAmountError as exc:
            logger.info("discount_invalid_amount", extra={
                "field_name": exc.field_name,
                "value": exc.value,
            })
            return DiscountResult.error(CalculationErrorKind.INVALID_AMOUNT, str(exc))

        try:
            return self._apply(base, amount, is_percentage)
        except ArithmeticError as exc:
            logger.exception("discount_calculation_failed", extra={
                "base_amount": str(base),
                "discount_amount": str(amount),
                "is_percentage": is_percentage,
            })
            return DiscountResult.error(
                CalculationErrorKind.INVALID_CALCULATION,
                f"Calculation error: {describe_fault(exc)}",
            )

    def _apply(self, base: Decimal, amount: Decimal, is_percentage: bool) -> DiscountResult:
        if base <= ZERO:
            # Discounting a non-positive base is a no-op, not a fault
            return DiscountResult()

        if amount < ZERO:
            logger.info("discount_rejected", extra={
                "reason": CalculationErrorKind.NEGATIVE_DISCOUNT.value,
                "discount_amount": str(amount),
            })
            return DiscountResult.error(CalculationErrorKind.NEGATIVE_DISCOUNT)

        if is_percentage:
            if amount > ONE_HUNDRED:
                logger.info("discount_rejected", extra={
                    "reason": CalculationErrorKind.INVALID_DISCOUNT_PERCENTAGE.value,
                    "discount_percentage": str(amount),
                })
                return DiscountResult.error(CalculationErrorKind.INVALID_DISCOUNT_PERCENTAGE)

            discount_value = round_money(percent_of(base, amount))
            discount_percentage = amount
        else:
            if amount > base:
                logger.info("discount_rejected", extra={
                    "reason": CalculationErrorKind.DISCOUNT_EXCEEDS_BASE.value,
                    "discount_amount": str(amount),
                    "base_amount": str(base),
                })
                return DiscountResult.error(CalculationErrorKind.DISCOUNT_EXCEEDS_BASE)

            discount_value = amount
            discount_percentage = discount_value / base * ONE_HUNDRED

        return DiscountResult(
            discount_value=discount_value,
            discount_percentage=discount_percentage,
            net_amount=base - discount_value,
            is_valid=ZERO <= discount_value <= base,
        )


_default_calculator = DiscountCalculator()


def calculate_discount(
    base_amount: Decimal,
    discount_amount: Decimal,
    is_percentage: bool = False,
) -> DiscountResult:
    """Module-level shortcut for ``DiscountCalculator().calculate``."""
    return _default_calculator.calculate(base_amount, discount_amount, is_percentage)
