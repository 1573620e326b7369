"""
Tests for the Tax Engine.

Covers:
- The five rounding policies on the reference amount (33.33 at 14%)
- Audit details (raw, rounded, difference, effective rate)
- Zero base / zero rate short-circuit
- Rounding-mode parsing and rejection
"""

from decimal import Decimal

import pytest

from invoice_engines.tax import TaxCalculator, apply_rounding, calculate_tax
from invoice_engines.types import RoundingMode, TaxResult
from invoice_kernel.domain.error_kinds import CalculationErrorKind
from invoice_kernel.exceptions import InvalidRoundingModeError


class TestRoundingPolicies:
    """33.33 at 14% gives a raw tax of 4.6662."""

    def setup_method(self):
        self.calculator = TaxCalculator()
        self.base = Decimal("33.33")
        self.rate = Decimal("14")

    @pytest.mark.parametrize(
        "mode, expected",
        [
            (RoundingMode.NORMAL, "4.67"),
            (RoundingMode.ROUND_UP, "4.67"),
            (RoundingMode.ROUND_DOWN, "4.66"),
            (RoundingMode.TO_NEAREST_5, "4.65"),
            (RoundingMode.TO_NEAREST_10, "4.70"),
        ],
    )
    def test_reference_amount(self, mode, expected):
        result = self.calculator.calculate(self.base, self.rate, mode)

        assert result.is_valid
        assert result.details.raw_tax_amount == Decimal("4.6662")
        assert result.tax_amount == Decimal(expected)
        assert str(result.tax_amount) == expected

    def test_total_including_tax(self):
        result = self.calculator.calculate(self.base, self.rate, RoundingMode.NORMAL)

        assert result.total_including_tax == Decimal("38.00")

    def test_normal_rounds_half_away_from_zero(self):
        """1.25 at 10% is 0.125 -> 0.13 (banker's rounding would give 0.12)."""
        result = self.calculator.calculate(Decimal("1.25"), Decimal("10"), RoundingMode.NORMAL)

        assert result.tax_amount == Decimal("0.13")

    def test_round_up_on_exact_cent_is_unchanged(self):
        result = self.calculator.calculate(Decimal("100"), Decimal("14"), RoundingMode.ROUND_UP)

        assert result.tax_amount == Decimal("14.00")

    def test_nearest_five_midpoint_goes_up(self):
        """raw 0.025 * 20 = 0.5 -> 1 -> 0.05."""
        assert apply_rounding(Decimal("0.025"), RoundingMode.TO_NEAREST_5) == Decimal("0.05")

    def test_nearest_ten_rounds_down_below_midpoint(self):
        assert apply_rounding(Decimal("4.649"), RoundingMode.TO_NEAREST_10) == Decimal("4.60")


class TestTaxDetails:
    """Audit details recorded for every non-zero tax."""

    def test_details_for_nearest_five(self):
        result = calculate_tax(Decimal("33.33"), Decimal("14"), RoundingMode.TO_NEAREST_5)
        details = result.details

        assert details.base_amount == Decimal("33.33")
        assert details.tax_rate == Decimal("14")
        assert details.rounded_tax_amount == Decimal("4.65")
        assert details.rounding_difference == Decimal("-0.0162")
        assert details.effective_tax_rate == Decimal("4.65") / Decimal("33.33") * 100

    def test_effective_rate_equals_nominal_when_exact(self):
        result = calculate_tax(Decimal("200"), Decimal("15"))

        assert result.details.effective_tax_rate == Decimal("15")
        assert result.details.rounding_difference == Decimal("0")


class TestNoTax:

    @pytest.mark.parametrize(
        "base, rate",
        [("0", "14"), ("-10", "14"), ("100", "0"), ("100", "-5")],
    )
    def test_zero_tax_valid(self, base, rate):
        result = calculate_tax(Decimal(base), Decimal(rate))

        assert result == TaxResult()
        assert result.is_valid
        assert result.tax_amount == Decimal("0")
        assert result.details is None

    def test_invalid_amount(self):
        result = calculate_tax("twelve", Decimal("14"))

        assert not result.is_valid
        assert result.error_kind == CalculationErrorKind.INVALID_AMOUNT


class TestRoundingModeParsing:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("normal", RoundingMode.NORMAL),
            ("ROUND_UP", RoundingMode.ROUND_UP),
            ("RoundDown", RoundingMode.ROUND_DOWN),
            ("ToNearest5", RoundingMode.TO_NEAREST_5),
            ("to_nearest_10", RoundingMode.TO_NEAREST_10),
            (RoundingMode.TO_NEAREST_10, RoundingMode.TO_NEAREST_10),
        ],
    )
    def test_parse(self, raw, expected):
        assert RoundingMode.parse(raw) is expected

    def test_string_mode_accepted_by_calculator(self):
        result = calculate_tax(Decimal("33.33"), Decimal("14"), "RoundDown")

        assert result.tax_amount == Decimal("4.66")

    @pytest.mark.parametrize("raw", ["bankers", "", None, 3])
    def test_unknown_mode_raises(self, raw):
        with pytest.raises(InvalidRoundingModeError) as exc_info:
            RoundingMode.parse(raw)

        assert exc_info.value.code == "INVALID_ROUNDING_MODE"

    def test_every_mode_has_a_policy(self):
        for mode in RoundingMode:
            assert apply_rounding(Decimal("1.234"), mode) >= Decimal("1.20")


class TestOversizedAmounts:

    @pytest.mark.parametrize("mode", list(RoundingMode))
    def test_huge_base_is_invalid_calculation(self, mode):
        result = calculate_tax(Decimal("1E+27"), Decimal("14"), mode)

        assert not result.is_valid
        assert result.error_kind == CalculationErrorKind.INVALID_CALCULATION
        assert result.error_message == "Calculation error: InvalidOperation"
        assert result.details is None

    def test_failure_logged_with_traceback(self, captured_logs):
        calculate_tax(Decimal("1E+27"), Decimal("14"))

        failures = [r for r in captured_logs() if r["message"] == "tax_calculation_failed"]
        assert failures[0]["level"] == "ERROR"
        assert failures[0]["rounding_mode"] == "normal"
        assert "traceback" in failures[0]
