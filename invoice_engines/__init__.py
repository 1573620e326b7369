"""
Module: invoice_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the invoice
    calculation core.  This is the canonical import surface for hosts and
    for invoice_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import invoice_kernel.
    MUST NOT import invoice_config or invoice_services.

Invariants enforced:
    - Purity: calculators never read the clock; only the orchestrator's
      change events carry a timestamp, from an injected Clock.
    - Decimal-only arithmetic for every monetary amount.
    - Determinism: identical inputs always produce identical outputs.
    - Domain-rule violations come back as invalid results, never exceptions.

Usage:
    from invoice_engines import calculate_invoice_totals, CalculationInput, LineInput
    from invoice_engines.tax import TaxCalculator
    from invoice_engines.discount import DiscountCalculator
"""

from invoice_engines.discount import DiscountCalculator, calculate_discount
from invoice_engines.engine import AutoCalculationsEngine
from invoice_engines.invoice_totals import InvoiceTotalsOrchestrator, calculate_invoice_totals
from invoice_engines.line import LineCalculator, calculate_line
from invoice_engines.notifications import (
    CalculationChangedEvent,
    CalculationListener,
    CalculationListenerRegistry,
    CalculationType,
)
from invoice_engines.tax import TaxCalculator, apply_rounding, calculate_tax
from invoice_engines.types import (
    CalculationInput,
    CalculationResult,
    DiscountResult,
    LineInput,
    LineResult,
    RoundingMode,
    TaxDetails,
    TaxResult,
)
from invoice_engines.validator import CalculationValidator, validate

__all__ = [
    "AutoCalculationsEngine",
    "CalculationChangedEvent",
    "CalculationInput",
    "CalculationListener",
    "CalculationListenerRegistry",
    "CalculationResult",
    "CalculationType",
    "CalculationValidator",
    "DiscountCalculator",
    "DiscountResult",
    "InvoiceTotalsOrchestrator",
    "LineCalculator",
    "LineInput",
    "LineResult",
    "RoundingMode",
    "TaxCalculator",
    "TaxDetails",
    "TaxResult",
    "apply_rounding",
    "calculate_discount",
    "calculate_invoice_totals",
    "calculate_line",
    "calculate_tax",
    "validate",
]
