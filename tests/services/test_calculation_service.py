"""
Tests for the settings-aware calculation service.

Settings supply the tax defaults; explicit options override them.
"""

from decimal import Decimal

import pytest

from invoice_config import get_active_settings
from invoice_engines import AutoCalculationsEngine, LineInput, RoundingMode
from invoice_kernel.exceptions import InvalidRoundingModeError
from invoice_services import InvoiceCalculationService


class TestDefaultSettings:

    def setup_method(self):
        self.service = InvoiceCalculationService(get_active_settings())

    def test_calculate_with_mapping_items(self):
        result = self.service.calculate(
            [{"quantity": "2", "unit_price": "50"}],
            paid_amount="100",
        )

        assert result.is_valid
        assert result.tax_amount == Decimal("14.00")
        assert result.net_total == Decimal("114.00")
        assert result.remaining_amount == Decimal("14.00")

    def test_summarize(self):
        result = self.service.calculate([{"quantity": "2", "unit_price": "50"}])

        summary = self.service.summarize(result)

        assert summary["net_total"] == "114.00 ج.م"
        assert summary["tax_amount"] == "14.00 ج.م"

    def test_build_input_uses_settings(self):
        calculation_input = self.service.build_input([LineInput(Decimal("1"), Decimal("10"))])

        assert calculation_input.tax_rate == Decimal("14")
        assert calculation_input.tax_on_net_of_discount is True
        assert calculation_input.rounding_mode is RoundingMode.NORMAL

    def test_line_discount_from_mapping(self):
        calculation_input = self.service.build_input([
            {"quantity": 1, "unit_price": 100, "discount_amount": 10, "discount_is_percentage": 1},
        ])

        line = calculation_input.items[0]
        assert line.discount_amount == 10
        assert line.discount_is_percentage is True

    def test_missing_key(self):
        with pytest.raises(KeyError):
            self.service.build_input([{"quantity": "1"}])


class TestOverrides:

    def setup_method(self):
        self.service = InvoiceCalculationService(get_active_settings("retail_cash"))
        self.items = [LineInput(quantity=Decimal("1"), unit_price=Decimal("33.33"))]

    def test_retail_cash_defaults(self):
        """Tax on the gross sub-total, rounded to 0.05."""
        result = self.service.calculate(self.items, global_discount_amount=Decimal("3.33"))

        assert result.base_for_tax == Decimal("33.33")
        assert result.tax_amount == Decimal("4.65")
        assert result.net_total == Decimal("37.98")

    def test_rounding_override(self):
        result = self.service.calculate(self.items, rounding_mode="round_down")

        assert result.tax_amount == Decimal("4.66")

    def test_tax_rate_override_to_zero(self):
        result = self.service.calculate(self.items, tax_rate=Decimal("0"))

        assert result.tax_amount == Decimal("0")
        assert result.net_total == Decimal("33.33")

    def test_tax_base_override(self):
        result = self.service.calculate(
            self.items,
            global_discount_amount=Decimal("3.33"),
            tax_on_net_of_discount=True,
        )

        assert result.base_for_tax == Decimal("30.00")
        assert result.tax_amount == Decimal("4.20")

    def test_invalid_rounding_override(self):
        with pytest.raises(InvalidRoundingModeError):
            self.service.build_input(self.items, rounding_mode="bankers")


class TestEngineSharing:

    def test_listeners_on_supplied_engine(self):
        engine = AutoCalculationsEngine()
        events = []
        engine.add_listener(events.append)
        service = InvoiceCalculationService(get_active_settings(), engine=engine)

        service.calculate([{"quantity": "1", "unit_price": "10"}])

        assert service.engine is engine
        assert len(events) == 1
        assert events[0].result.net_total == Decimal("11.40")
