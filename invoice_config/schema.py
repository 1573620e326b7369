"""
Calculation settings schema.

Human-authored YAML settings files are parsed into these frozen types by
``invoice_config.loader``.  Tax settings supply the defaults an editing
host feeds into ``CalculationInput``; currency settings drive the
presentation adapter and never reach the calculation core.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from invoice_engines.types import RoundingMode


class SymbolPosition(str, Enum):
    """Where the currency symbol goes relative to the number."""

    PREFIX = "prefix"
    SUFFIX = "suffix"


@dataclass(frozen=True)
class TaxSettings:
    """Default tax configuration for new invoices."""

    rate_percent: Decimal
    on_net_of_discount: bool = True
    rounding_mode: RoundingMode = RoundingMode.NORMAL


@dataclass(frozen=True)
class CurrencySettings:
    """How amounts are displayed to the user."""

    code: str
    symbol: str
    decimal_places: int = 2
    symbol_position: SymbolPosition = SymbolPosition.SUFFIX
    thousands_separator: str = ","
    decimal_separator: str = "."


@dataclass(frozen=True)
class CalculationSettings:
    """One complete settings file."""

    settings_id: str
    tax: TaxSettings
    currency: CurrencySettings
    checksum: str = ""
