"""
invoice_engines.invoice_totals -- Invoice totals orchestrator.

Responsibility:
    Run the full pipeline for one invoice:

        SubTotal -> LineDiscounts -> GlobalDiscount -> TotalDiscount
        -> BaseForTax -> Tax -> NetTotal -> Remaining -> percentages

    then validate the result and notify listeners.

Architecture position:
    Engines -- pure calculation layer.  Composes the tax and line
    calculators and the validator; holds no per-call state.

Invariants enforced:
    - Determinism: identical ``CalculationInput`` yields an equal result.
    - Every returned result has been through ``CalculationValidator``; an
      inconsistent total is always flagged ``is_valid = False``.
    - No exception escapes ``calculate_invoice_totals``.  Unexpected faults
      are logged with traceback and returned as ``INVALID_CALCULATION``.

Discount policy (kept as the invoicing screens have always behaved; do not
normalise without a product decision):
    - Line discounts are summed from the caller-supplied
      ``LineInput.discount_amount`` values.  They are NOT re-derived through
      ``DiscountCalculator``, so a 10% line discount on a 100.00 line
      contributes 10 because the caller passed 10, not because 10% was
      applied.  ``line_results`` shows the re-derived figures separately.
    - The global discount is silently clamped to the sub-total when fixed,
      whereas ``DiscountCalculator`` rejects an overflowing fixed discount
      with ``DISCOUNT_EXCEEDS_BASE``.
"""

from __future__ import annotations

import time
from dataclasses import replace
from decimal import Decimal

from invoice_engines.line import LineCalculator
from invoice_engines.notifications import (
    CalculationChangedEvent,
    CalculationListenerRegistry,
    CalculationType,
)
from invoice_engines.tax import TaxCalculator
from invoice_engines.tracer import traced_engine
from invoice_engines.types import CalculationInput, CalculationResult, LineInput, RoundingMode
from invoice_engines.validator import CalculationValidator
from invoice_kernel.domain.clock import Clock, SystemClock
from invoice_kernel.domain.error_kinds import CalculationErrorKind
from invoice_kernel.domain.values import ONE_HUNDRED, ZERO, percent_of, round_money, to_decimal
from invoice_kernel.exceptions import InvalidAmountError, describe_fault
from invoice_kernel.logging_config import get_logger

logger = get_logger("engines.invoice_totals")


class InvoiceTotalsOrchestrator:
    """
    Compute, validate and publish invoice totals.

    Contract:
        ``calculate_invoice_totals`` is a pure function of its input apart
        from publishing to the listener registry.  Safe to call from many
        threads at once.
    Guarantees:
        - Listeners receive one ``INVOICE_TOTAL`` event per completed
          calculation, valid or not.  Faulted calculations publish nothing.
        - ``line_results`` are in input order.
    Non-goals:
        - No persistence, no currency formatting, no authorisation of
          discounts.
    """

    def __init__(
        self,
        tax_calculator: TaxCalculator | None = None,
        line_calculator: LineCalculator | None = None,
        validator: CalculationValidator | None = None,
        listeners: CalculationListenerRegistry | None = None,
        clock: Clock | None = None,
    ):
        self._tax_calculator = tax_calculator or TaxCalculator()
        self._line_calculator = line_calculator or LineCalculator()
        self._validator = validator or CalculationValidator()
        self._listeners = listeners if listeners is not None else CalculationListenerRegistry()
        self._clock = clock or SystemClock()

    @property
    def listeners(self) -> CalculationListenerRegistry:
        return self._listeners

    @traced_engine("invoice_totals", "1.0", fingerprint_fields=("calculation_input",))
    def calculate_invoice_totals(self, calculation_input: CalculationInput) -> CalculationResult:
        """
        Calculate the totals of one invoice.

        Args:
            calculation_input: Lines, discounts, tax settings and paid amount.

        Returns:
            CalculationResult; ``is_valid`` is False with ``error_message``
            set when an invariant fails or the input cannot be computed.
        """
        t0 = time.monotonic()
        item_count = len(calculation_input.items) if calculation_input.items else 0
        logger.info("invoice_totals_started", extra={"item_count": item_count})

        try:
            result = self._run_pipeline(calculation_input)
        except InvalidAmountError as exc:
            logger.info("invoice_totals_invalid_amount", extra={
                "field_name": exc.field_name,
                "value": exc.value,
            })
            return CalculationResult.error(str(exc), kind=CalculationErrorKind.INVALID_AMOUNT)
        except Exception as exc:
            logger.exception("invoice_totals_failed", extra={"item_count": item_count})
            return CalculationResult.error(f"Calculation error: {describe_fault(exc)}")

        self._listeners.publish(CalculationChangedEvent(
            calculation_type=CalculationType.INVOICE_TOTAL,
            result=result,
            is_valid=result.is_valid,
            timestamp=self._clock.now(),
        ))

        logger.info("invoice_totals_completed", extra={
            "item_count": item_count,
            "sub_total": str(result.sub_total),
            "total_discount": str(result.total_discount),
            "base_for_tax": str(result.base_for_tax),
            "tax_amount": str(result.tax_amount),
            "net_total": str(result.net_total),
            "remaining_amount": str(result.remaining_amount),
            "is_valid": result.is_valid,
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        })
        return result

    def _run_pipeline(self, calculation_input: CalculationInput) -> CalculationResult:
        items: tuple[LineInput, ...] = tuple(calculation_input.items or ())
        paid_amount = to_decimal(calculation_input.paid_amount, "paid_amount")
        rounding_mode = RoundingMode.parse(calculation_input.rounding_mode)

        # Step 1: sub-total of gross line amounts
        sub_total = sum(
            (
                to_decimal(item.quantity, "quantity") * to_decimal(item.unit_price, "unit_price")
                for item in items
            ),
            ZERO,
        )

        # Step 2: caller-supplied line discounts, summed as given (see module docstring)
        line_discounts = sum(
            (to_decimal(item.discount_amount, "discount_amount") for item in items),
            ZERO,
        )

        # Step 3: document-level discount, clamped rather than rejected
        global_discount = self._global_discount(
            sub_total,
            to_decimal(calculation_input.global_discount_amount, "global_discount_amount"),
            calculation_input.global_discount_is_percentage,
        )

        # Step 4
        total_discount = line_discounts + global_discount

        # Step 5
        if calculation_input.tax_on_net_of_discount:
            base_for_tax = max(ZERO, sub_total - total_discount)
        else:
            base_for_tax = sub_total

        # Step 6
        tax = self._tax_calculator.calculate(base_for_tax, calculation_input.tax_rate, rounding_mode)
        if not tax.is_valid:
            return CalculationResult.error(
                tax.error_message or CalculationErrorKind.INVALID_CALCULATION.default_message,
                kind=tax.error_kind or CalculationErrorKind.INVALID_CALCULATION,
            )

        # Steps 7-8
        net_total = base_for_tax + tax.tax_amount
        remaining_amount = max(ZERO, net_total - paid_amount)

        # Step 9
        paid_percentage = paid_amount / net_total * ONE_HUNDRED if net_total > ZERO else ZERO
        discount_percentage = total_discount / sub_total * ONE_HUNDRED if sub_total > ZERO else ZERO

        line_results = tuple(
            self._line_calculator.calculate(
                item.quantity, item.unit_price, item.discount_amount, item.discount_is_percentage
            )
            for item in items
        )

        result = CalculationResult(
            sub_total=sub_total,
            line_discounts=line_discounts,
            global_discount=global_discount,
            total_discount=total_discount,
            base_for_tax=base_for_tax,
            tax_amount=tax.tax_amount,
            net_total=net_total,
            remaining_amount=remaining_amount,
            paid_percentage=paid_percentage,
            discount_percentage=discount_percentage,
            tax_details=tax.details,
            line_results=line_results,
        )

        failed = self._validator.check(result)
        if failed:
            logger.info("invoice_totals_invariants_violated", extra={
                "failed_invariants": [inv.value for inv in failed],
            })
            return replace(
                result,
                is_valid=False,
                error_kind=CalculationErrorKind.INVALID_CALCULATION,
                error_message="Calculation invariants violated: "
                + ", ".join(inv.value for inv in failed),
                failed_invariants=failed,
            )
        return result

    @staticmethod
    def _global_discount(sub_total: Decimal, amount: Decimal, is_percentage: bool) -> Decimal:
        if sub_total <= ZERO or amount <= ZERO:
            return ZERO
        if is_percentage:
            return round_money(percent_of(sub_total, amount))
        return min(amount, sub_total)


def calculate_invoice_totals(calculation_input: CalculationInput) -> CalculationResult:
    """Calculate totals with a listener-less orchestrator."""
    return InvoiceTotalsOrchestrator().calculate_invoice_totals(calculation_input)
