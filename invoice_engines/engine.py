"""
invoice_engines.engine -- Single entry point for invoice editing hosts.

``AutoCalculationsEngine`` bundles the calculators, the validator and the
listener registry behind one object, so an editing screen holds a single
reference and subscribes once.

Usage:
    from decimal import Decimal
    from invoice_engines import AutoCalculationsEngine, CalculationInput, LineInput

    engine = AutoCalculationsEngine()
    engine.add_listener(lambda event: print(event.result.net_total))
    engine.calculate_invoice_totals(CalculationInput(
        items=(LineInput(quantity=Decimal("2"), unit_price=Decimal("50")),),
        tax_rate=Decimal("14"),
    ))
"""

from __future__ import annotations

from decimal import Decimal

from invoice_engines.discount import DiscountCalculator
from invoice_engines.invoice_totals import InvoiceTotalsOrchestrator
from invoice_engines.line import LineCalculator
from invoice_engines.notifications import CalculationListener, CalculationListenerRegistry
from invoice_engines.tax import TaxCalculator
from invoice_engines.types import (
    CalculationInput,
    CalculationResult,
    DiscountResult,
    LineResult,
    RoundingMode,
    TaxResult,
)
from invoice_engines.validator import CalculationValidator
from invoice_kernel.domain.clock import Clock
from invoice_kernel.domain.values import ZERO


class AutoCalculationsEngine:
    """
    Facade over the invoice calculators.

    Only ``calculate_invoice_totals`` publishes change events; the other
    operations are previews and stay silent.
    """

    def __init__(self, clock: Clock | None = None):
        self._discount_calculator = DiscountCalculator()
        self._tax_calculator = TaxCalculator()
        self._line_calculator = LineCalculator(self._discount_calculator)
        self._validator = CalculationValidator()
        self._listeners = CalculationListenerRegistry()
        self._orchestrator = InvoiceTotalsOrchestrator(
            tax_calculator=self._tax_calculator,
            line_calculator=self._line_calculator,
            validator=self._validator,
            listeners=self._listeners,
            clock=clock,
        )

    def calculate_invoice_totals(self, calculation_input: CalculationInput) -> CalculationResult:
        return self._orchestrator.calculate_invoice_totals(calculation_input)

    def calculate_line_total(
        self,
        quantity: Decimal,
        unit_price: Decimal,
        discount_amount: Decimal = ZERO,
        discount_is_percentage: bool = False,
    ) -> LineResult:
        return self._line_calculator.calculate(
            quantity, unit_price, discount_amount, discount_is_percentage
        )

    def calculate_discount(
        self,
        base_amount: Decimal,
        discount_amount: Decimal,
        is_percentage: bool = False,
    ) -> DiscountResult:
        return self._discount_calculator.calculate(base_amount, discount_amount, is_percentage)

    def calculate_tax(
        self,
        base_amount: Decimal,
        tax_rate: Decimal,
        rounding_mode: RoundingMode | str = RoundingMode.NORMAL,
    ) -> TaxResult:
        return self._tax_calculator.calculate(base_amount, tax_rate, rounding_mode)

    def validate_calculations(self, result: CalculationResult) -> bool:
        return self._validator.validate(result)

    def add_listener(self, listener: CalculationListener) -> None:
        self._listeners.add_listener(listener)

    def remove_listener(self, listener: CalculationListener) -> bool:
        return self._listeners.remove_listener(listener)
