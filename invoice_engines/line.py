"""
Line Engine - Gross, discount and net amounts for one invoice line.

Pure function with no I/O.  The discount is delegated to
``DiscountCalculator`` so a line obeys exactly the same percentage and
overflow rules as an ad-hoc discount preview.
"""

from __future__ import annotations

from decimal import Decimal

from invoice_engines.discount import DiscountCalculator
from invoice_engines.tracer import traced_engine
from invoice_engines.types import LineResult
from invoice_kernel.domain.error_kinds import CalculationErrorKind
from invoice_kernel.domain.values import ZERO, to_decimal
from invoice_kernel.exceptions import InvalidAmountError, describe_fault
from invoice_kernel.logging_config import get_logger

logger = get_logger("engines.line")


class LineCalculator:
    """
    Calculate one invoice line.

    Contract:
        Never raises for bad numbers; an amount too large for Decimal
        arithmetic yields ``INVALID_CALCULATION``.
    Guarantees:
        - Quantity must be positive and unit price non-negative, otherwise
          the result is ``INVALID_LINE_INPUT``.
        - A rejected discount makes the line invalid and carries the
          discount's error kind; gross and net are still filled in with no
          discount applied so the host can keep displaying the line.
        - ``net_amount`` is floored at zero.
    """

    def __init__(self, discount_calculator: DiscountCalculator | None = None):
        self._discount_calculator = discount_calculator or DiscountCalculator()

    @traced_engine(
        "line", "1.0",
        fingerprint_fields=("quantity", "unit_price", "discount_amount", "discount_is_percentage"),
    )
    def calculate(
        self,
        quantity: Decimal,
        unit_price: Decimal,
        discount_amount: Decimal = ZERO,
        discount_is_percentage: bool = False,
    ) -> LineResult:
        """
        Calculate gross, discount and net amounts for a line.

        Args:
            quantity: Units sold; must be greater than zero.
            unit_price: Price per unit; must not be negative.
            discount_amount: Percentage points or a fixed amount for the line.
            discount_is_percentage: True if ``discount_amount`` is a percentage.
        """
        try:
            qty = to_decimal(quantity, "quantity")
            price = to_decimal(unit_price, "unit_price")
        except InvalidAmountError as exc:
            logger.info("line_invalid_amount", extra={
                "field_name": exc.field_name,
                "value": exc.value,
            })
            return LineResult.error(CalculationErrorKind.INVALID_AMOUNT, str(exc))

        if qty <= ZERO or price < ZERO:
            logger.info("line_rejected", extra={
                "reason": CalculationErrorKind.INVALID_LINE_INPUT.value,
                "quantity": str(qty),
                "unit_price": str(price),
            })
            return LineResult.error(CalculationErrorKind.INVALID_LINE_INPUT)

        try:
            return self._apply(qty, price, discount_amount, discount_is_percentage)
        except ArithmeticError as exc:
            logger.exception("line_calculation_failed", extra={
                "quantity": str(qty),
                "unit_price": str(price),
            })
            return LineResult.error(
                CalculationErrorKind.INVALID_CALCULATION,
                f"Calculation error: {describe_fault(exc)}",
            )

    def _apply(
        self,
        qty: Decimal,
        price: Decimal,
        discount_amount: Decimal,
        discount_is_percentage: bool,
    ) -> LineResult:
        gross = qty * price
        discount = self._discount_calculator.calculate(
            gross, discount_amount, discount_is_percentage
        )

        if not discount.is_valid:
            return LineResult(
                gross_amount=gross,
                net_amount=gross,
                net_unit_price=price,
                is_valid=False,
                error_kind=discount.error_kind,
                error_message=discount.error_message,
            )

        discount_value = discount.discount_value
        net = max(ZERO, gross - discount_value)

        return LineResult(
            gross_amount=gross,
            discount_amount=discount_value,
            net_amount=net,
            net_unit_price=net / qty,
            discount_per_unit=discount_value / qty,
            discount_percentage=discount.discount_percentage,
            is_valid=ZERO <= discount_value <= gross,
        )


_default_calculator = LineCalculator()


def calculate_line(
    quantity: Decimal,
    unit_price: Decimal,
    discount_amount: Decimal = ZERO,
    discount_is_percentage: bool = False,
) -> LineResult:
    """Module-level shortcut for ``LineCalculator().calculate``."""
    return _default_calculator.calculate(
        quantity, unit_price, discount_amount, discount_is_percentage
    )
