"""
invoice_engines.validator -- Invariant checks for settled invoice totals.

Responsibility:
    Decide whether a ``CalculationResult`` is internally consistent.
    A failed check is reported, never raised; the orchestrator turns it
    into ``is_valid = False`` on the result it returns.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Depends only on the result shape and invoice_kernel.invariants.

Invariants enforced:
    - NON_NEGATIVE_AMOUNTS, DISCOUNT_WITHIN_SUBTOTAL, NON_NEGATIVE_TAX_BASE
      and NET_TOTAL_CLOSURE via ``check`` / ``validate``.
    - REMAINING_FLOOR via ``validate_remaining``, which needs the paid
      amount that the result itself does not carry.
"""

from __future__ import annotations

from decimal import Decimal

from invoice_engines.types import CalculationResult
from invoice_kernel.domain.values import MONEY_TOLERANCE, ZERO, to_decimal
from invoice_kernel.invariants import CalculationInvariant
from invoice_kernel.logging_config import get_logger

logger = get_logger("engines.validator")

_RESULT_INVARIANTS: tuple[CalculationInvariant, ...] = (
    CalculationInvariant.NON_NEGATIVE_AMOUNTS,
    CalculationInvariant.DISCOUNT_WITHIN_SUBTOTAL,
    CalculationInvariant.NON_NEGATIVE_TAX_BASE,
    CalculationInvariant.NET_TOTAL_CLOSURE,
)

_MONETARY_FIELDS: tuple[str, ...] = (
    "sub_total",
    "line_discounts",
    "global_discount",
    "total_discount",
    "base_for_tax",
    "tax_amount",
    "net_total",
    "remaining_amount",
)


class CalculationValidator:
    """
    Check a finished result against the calculation invariants.

    Contract:
        Never raises.  An unexpected fault while checking is logged and
        reported as every invariant failing.
    """

    def check(self, result: CalculationResult) -> tuple[CalculationInvariant, ...]:
        """Return the invariants ``result`` violates, in catalogue order."""
        try:
            return self._failed_invariants(result)
        except Exception:
            logger.exception("calculation_validation_failed")
            return _RESULT_INVARIANTS

    def validate(self, result: CalculationResult) -> bool:
        """True if ``result`` satisfies every result invariant."""
        failed = self.check(result)
        if failed:
            logger.info("calculation_invariants_violated", extra={
                "failed_invariants": [inv.value for inv in failed],
            })
            return False
        return True

    def validate_remaining(self, result: CalculationResult, paid_amount: Decimal) -> bool:
        """True if ``remaining_amount == max(0, net_total - paid_amount)``."""
        try:
            paid = to_decimal(paid_amount, "paid_amount")
            return result.remaining_amount == max(ZERO, result.net_total - paid)
        except Exception:
            logger.exception("remaining_validation_failed")
            return False

    def _failed_invariants(self, result: CalculationResult) -> tuple[CalculationInvariant, ...]:
        failed: list[CalculationInvariant] = []

        if any(getattr(result, name) < ZERO for name in _MONETARY_FIELDS):
            failed.append(CalculationInvariant.NON_NEGATIVE_AMOUNTS)

        if result.total_discount < ZERO or result.total_discount > result.sub_total:
            failed.append(CalculationInvariant.DISCOUNT_WITHIN_SUBTOTAL)

        if result.base_for_tax < ZERO:
            failed.append(CalculationInvariant.NON_NEGATIVE_TAX_BASE)

        expected_net = result.base_for_tax + result.tax_amount
        if abs(result.net_total - expected_net) > MONEY_TOLERANCE:
            failed.append(CalculationInvariant.NET_TOTAL_CLOSURE)

        return tuple(failed)


_default_validator = CalculationValidator()


def validate(result: CalculationResult) -> bool:
    """Module-level shortcut for ``CalculationValidator().validate``."""
    return _default_validator.validate(result)
