"""
invoice_services.formatting -- Currency presentation adapter.

Responsibility:
    Turn the language-neutral Decimal amounts of a ``CalculationResult``
    into display strings using ``CurrencySettings``.  The calculation core
    never formats; this adapter is the only place symbols, separators and
    display precision are applied.

Architecture position:
    Services -- host-side adapter over engines + config.  Stateless apart
    from the immutable settings it was built with, so one instance can be
    shared across threads.
"""

from __future__ import annotations

from decimal import Decimal

from invoice_config.schema import CurrencySettings, SymbolPosition
from invoice_engines.types import CalculationResult
from invoice_kernel.domain.values import round_half_away, to_decimal

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

_PERCENTAGE_FIELDS: tuple[str, ...] = (
    "paid_percentage",
    "discount_percentage",
)

_GROUP_PLACEHOLDER = "\x00"


class CurrencyFormatter:
    """Formats amounts as e.g. ``1,234.50 ج.م`` or ``$1,234.50``."""

    def __init__(self, currency: CurrencySettings):
        self._currency = currency

    @property
    def currency(self) -> CurrencySettings:
        return self._currency

    def format_number(self, value: Decimal, places: int | None = None) -> str:
        """Group and separate ``value`` without a currency symbol."""
        places = self._currency.decimal_places if places is None else places
        exponent = Decimal(1).scaleb(-places)
        amount = round_half_away(to_decimal(value), exponent)

        text = f"{abs(amount):,.{places}f}"
        text = (
            text.replace(",", _GROUP_PLACEHOLDER)
            .replace(".", self._currency.decimal_separator)
            .replace(_GROUP_PLACEHOLDER, self._currency.thousands_separator)
        )
        return f"-{text}" if amount < 0 else text

    def format(self, value: Decimal) -> str:
        """Format ``value`` with the currency symbol."""
        number = self.format_number(value)
        symbol = self._currency.symbol
        if self._currency.symbol_position is SymbolPosition.PREFIX:
            if number.startswith("-"):
                return f"-{symbol}{number[1:]}"
            return f"{symbol}{number}"
        return f"{number} {symbol}"

    def format_percentage(self, value: Decimal) -> str:
        return f"{self.format_number(value, places=2)}%"

    def format_result(self, result: CalculationResult) -> dict[str, str]:
        """Display strings for every amount and percentage of ``result``."""
        formatted = {name: self.format(getattr(result, name)) for name in _MONETARY_FIELDS}
        formatted.update(
            {name: self.format_percentage(getattr(result, name)) for name in _PERCENTAGE_FIELDS}
        )
        if result.error_message:
            formatted["error_message"] = result.error_message
        return formatted
