"""
Pytest fixtures for the invoice calculation test suite.

Provides:
- Structured logging configured for the whole session
- LogContext isolation between tests
- A ``captured_logs`` fixture returning parsed JSON log records
- Small builders for line items and calculation inputs
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from invoice_engines.types import CalculationInput, LineInput, RoundingMode
from invoice_kernel.domain.clock import DeterministicClock
from invoice_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture invoice_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_invoice_totals(...)
            logs = captured_logs()
            assert any(r["message"] == "invoice_totals_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("invoice_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Builders
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock()


def make_line(
    quantity: str = "1",
    unit_price: str = "0",
    discount_amount: str = "0",
    discount_is_percentage: bool = False,
) -> LineInput:
    return LineInput(
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
        discount_amount=Decimal(discount_amount),
        discount_is_percentage=discount_is_percentage,
    )


def make_input(
    *items: LineInput,
    global_discount_amount: str = "0",
    global_discount_is_percentage: bool = False,
    tax_rate: str = "0",
    tax_on_net_of_discount: bool = True,
    rounding_mode: RoundingMode = RoundingMode.NORMAL,
    paid_amount: str = "0",
) -> CalculationInput:
    return CalculationInput(
        items=items,
        global_discount_amount=Decimal(global_discount_amount),
        global_discount_is_percentage=global_discount_is_percentage,
        tax_rate=Decimal(tax_rate),
        tax_on_net_of_discount=tax_on_net_of_discount,
        rounding_mode=rounding_mode,
        paid_amount=Decimal(paid_amount),
    )


@pytest.fixture
def line_factory():
    return make_line


@pytest.fixture
def input_factory():
    return make_input
