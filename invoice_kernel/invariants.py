"""
Calculation invariants contract.

These invariants hold for every valid ``CalculationResult``.  No settings
file, rounding mode or discount policy may relax them.  Checks live in
``invoice_engines.validator``; this module only names them.
"""

from enum import Enum, unique


@unique
class CalculationInvariant(str, Enum):
    """Structural guarantees of a settled invoice total."""

    NON_NEGATIVE_AMOUNTS = "non_negative_amounts"
    """Sub-total, net total, tax and every discount are zero or positive."""

    DISCOUNT_WITHIN_SUBTOTAL = "discount_within_subtotal"
    """Total discount lies between zero and the sub-total."""

    NON_NEGATIVE_TAX_BASE = "non_negative_tax_base"
    """The amount tax is computed on is never negative."""

    NET_TOTAL_CLOSURE = "net_total_closure"
    """Net total equals tax base plus tax within one cent."""

    REMAINING_FLOOR = "remaining_floor"
    """Remaining amount is net total minus paid amount, floored at zero."""


ALL_CALCULATION_INVARIANTS: frozenset[CalculationInvariant] = frozenset(CalculationInvariant)

# Engines and the kernel may not import from these packages.
# Enforced by tests/architecture/test_import_boundaries.py.
FORBIDDEN_CORE_IMPORTS: tuple[str, ...] = (
    "invoice_config",
    "invoice_services",
)
