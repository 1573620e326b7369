"""Tests for the currency presentation adapter."""

from decimal import Decimal

import pytest

from conftest import make_input, make_line
from invoice_config import get_active_settings
from invoice_config.schema import CurrencySettings, SymbolPosition
from invoice_engines import calculate_invoice_totals
from invoice_engines.types import CalculationResult
from invoice_services.formatting import CurrencyFormatter

USD = CurrencySettings(code="USD", symbol="$", symbol_position=SymbolPosition.PREFIX)


class TestSuffixCurrency:

    def setup_method(self):
        self.formatter = CurrencyFormatter(get_active_settings().currency)

    def test_grouping_and_symbol(self):
        assert self.formatter.format(Decimal("1234.5")) == "1,234.50 ج.م"

    def test_negative(self):
        assert self.formatter.format(Decimal("-1234.5")) == "-1,234.50 ج.م"

    def test_display_rounding_half_away(self):
        assert self.formatter.format(Decimal("0.125")) == "0.13 ج.م"

    def test_percentage(self):
        assert self.formatter.format_percentage(Decimal("14")) == "14.00%"


class TestPrefixCurrency:

    def setup_method(self):
        self.formatter = CurrencyFormatter(USD)

    def test_prefix(self):
        assert self.formatter.format(Decimal("1000000")) == "$1,000,000.00"

    def test_negative_sign_before_symbol(self):
        assert self.formatter.format(Decimal("-5")) == "-$5.00"


class TestSeparators:

    def test_swapped_separators(self):
        euro = CurrencySettings(
            code="EUR", symbol="€", thousands_separator=".", decimal_separator=",",
        )

        assert CurrencyFormatter(euro).format_number(Decimal("1234567.891")) == "1.234.567,89"

    @pytest.mark.parametrize(
        "places, expected",
        [(0, "1,235"), (3, "1,234.500")],
    )
    def test_decimal_places(self, places, expected):
        currency = CurrencySettings(code="XXX", symbol="X", decimal_places=places)

        assert CurrencyFormatter(currency).format_number(Decimal("1234.5")) == expected


class TestFormatResult:

    def test_reference_invoice(self):
        formatter = CurrencyFormatter(USD)
        result = calculate_invoice_totals(make_input(
            make_line("2", "50"),
            make_line("1", "100", "10", discount_is_percentage=True),
            tax_rate="15",
            paid_amount="100",
        ))

        formatted = formatter.format_result(result)

        assert formatted["sub_total"] == "$200.00"
        assert formatted["tax_amount"] == "$28.50"
        assert formatted["net_total"] == "$218.50"
        assert formatted["remaining_amount"] == "$118.50"
        assert formatted["discount_percentage"] == "5.00%"
        assert formatted["paid_percentage"] == "45.77%"
        assert "error_message" not in formatted

    def test_error_message_included(self):
        formatted = CurrencyFormatter(USD).format_result(CalculationResult.error("Calculation error: boom"))

        assert formatted["error_message"] == "Calculation error: boom"
        assert formatted["net_total"] == "$0.00"
