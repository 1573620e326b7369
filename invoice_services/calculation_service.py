"""
invoice_services.calculation_service -- Settings-aware invoice calculation.

Responsibility:
    Build ``CalculationInput`` from an editing host's line items, filling
    every field the host leaves unspecified from ``CalculationSettings``,
    run the engine and format the outcome for display.

Architecture position:
    Services -- orchestration over engines + config.  Holds the engine
    facade (and therefore its listener registry) for one editing session.

Usage:
    from invoice_config import get_active_settings
    from invoice_services import InvoiceCalculationService

    service = InvoiceCalculationService(get_active_settings())
    result = service.calculate(
        [{"quantity": "2", "unit_price": "50"}],
        paid_amount="100",
    )
    print(service.summarize(result)["net_total"])  # 114.00 ج.م
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from invoice_config.schema import CalculationSettings
from invoice_engines.engine import AutoCalculationsEngine
from invoice_engines.types import CalculationInput, CalculationResult, LineInput, RoundingMode
from invoice_kernel.domain.values import ZERO
from invoice_kernel.logging_config import get_logger
from invoice_services.formatting import CurrencyFormatter

logger = get_logger("services.calculation")

LineItem = LineInput | Mapping[str, Any]


def _to_line_input(item: LineItem) -> LineInput:
    if isinstance(item, LineInput):
        return item
    return LineInput(
        quantity=item["quantity"],
        unit_price=item["unit_price"],
        discount_amount=item.get("discount_amount", ZERO),
        discount_is_percentage=bool(item.get("discount_is_percentage", False)),
    )


class InvoiceCalculationService:
    """
    One editing session's calculation entry point.

    Contract:
        Amounts are passed through unchanged; coercion and rule checks are
        the engine's job, so bad numbers come back as invalid results.
        Mapping items must carry ``quantity`` and ``unit_price`` keys.
    """

    def __init__(
        self,
        settings: CalculationSettings,
        engine: AutoCalculationsEngine | None = None,
    ):
        self._settings = settings
        self._engine = engine or AutoCalculationsEngine()
        self._formatter = CurrencyFormatter(settings.currency)

    @property
    def settings(self) -> CalculationSettings:
        return self._settings

    @property
    def engine(self) -> AutoCalculationsEngine:
        return self._engine

    @property
    def formatter(self) -> CurrencyFormatter:
        return self._formatter

    def build_input(
        self,
        items: Iterable[LineItem],
        *,
        paid_amount: Decimal = ZERO,
        global_discount_amount: Decimal = ZERO,
        global_discount_is_percentage: bool = False,
        tax_rate: Decimal | None = None,
        tax_on_net_of_discount: bool | None = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> CalculationInput:
        """Assemble a ``CalculationInput``; ``None`` means "use the settings"."""
        tax = self._settings.tax
        return CalculationInput(
            items=tuple(_to_line_input(item) for item in items),
            global_discount_amount=global_discount_amount,
            global_discount_is_percentage=global_discount_is_percentage,
            tax_rate=tax.rate_percent if tax_rate is None else tax_rate,
            tax_on_net_of_discount=(
                tax.on_net_of_discount if tax_on_net_of_discount is None else tax_on_net_of_discount
            ),
            rounding_mode=(
                tax.rounding_mode if rounding_mode is None else RoundingMode.parse(rounding_mode)
            ),
            paid_amount=paid_amount,
        )

    def calculate(self, items: Iterable[LineItem], **options: Any) -> CalculationResult:
        """Build the input with ``build_input`` and run the engine."""
        calculation_input = self.build_input(items, **options)
        logger.debug("calculation_service_invoked", extra={
            "settings_id": self._settings.settings_id,
            "item_count": len(calculation_input.items),
            "rounding_mode": calculation_input.rounding_mode.value,
        })
        return self._engine.calculate_invoice_totals(calculation_input)

    def summarize(self, result: CalculationResult) -> dict[str, str]:
        """Formatted display strings for ``result``."""
        return self._formatter.format_result(result)
