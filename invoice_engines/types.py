"""
invoice_engines.types -- Inputs, results and the rounding-mode variant.

Responsibility:
    Shared value objects for every calculator in the package.  Inputs are
    what the editing host hands in; results are produced fresh per call and
    never mutated afterwards.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import invoice_kernel.

Invariants enforced:
    - Every type is a frozen dataclass; sequences are stored as tuples so
      inputs and results are hashable and safe to share across threads.
    - ``RoundingMode`` is a closed enum.  Parsing an unknown name raises
      ``InvalidRoundingModeError``; there is no fallback mode.
    - Results carry no timestamps, so identical input yields equal output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Sequence

from invoice_kernel.domain.error_kinds import CalculationErrorKind
from invoice_kernel.domain.values import ZERO
from invoice_kernel.exceptions import InvalidRoundingModeError
from invoice_kernel.invariants import CalculationInvariant


class RoundingMode(str, Enum):
    """Policy for turning raw tax into a monetary amount."""

    NORMAL = "normal"  # Half away from zero, to the cent
    ROUND_UP = "round_up"  # Ceiling to the cent
    ROUND_DOWN = "round_down"  # Floor to the cent
    TO_NEAREST_5 = "to_nearest_5"  # Nearest 0.05
    TO_NEAREST_10 = "to_nearest_10"  # Nearest 0.10

    @classmethod
    def parse(cls, value: Any, source: str | None = None) -> RoundingMode:
        """
        Resolve a mode from an enum member, its value or its name.

        Matching ignores case and underscores, so ``"to_nearest_5"``,
        ``"TO_NEAREST_5"`` and ``"ToNearest5"`` all resolve to
        ``TO_NEAREST_5``.

        Raises:
            InvalidRoundingModeError: if nothing matches.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().replace("_", "").replace("-", "").lower()
            for mode in cls:
                if wanted == mode.name.replace("_", "").lower():
                    return mode
        raise InvalidRoundingModeError(value, source=source)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineInput:
    """One invoice line as edited by the user."""

    quantity: Decimal
    unit_price: Decimal
    discount_amount: Decimal = ZERO
    discount_is_percentage: bool = False


@dataclass(frozen=True)
class CalculationInput:
    """
    Everything needed to total one invoice.

    ``items`` keeps the caller's order; it matters only for the order of
    ``CalculationResult.line_results``.
    """

    items: tuple[LineInput, ...] = ()
    global_discount_amount: Decimal = ZERO
    global_discount_is_percentage: bool = False
    tax_rate: Decimal = ZERO  # Percentage points (14 means 14%)
    tax_on_net_of_discount: bool = True
    rounding_mode: RoundingMode = RoundingMode.NORMAL
    paid_amount: Decimal = ZERO

    def __post_init__(self) -> None:
        items: Sequence[LineInput] | None = self.items
        object.__setattr__(self, "items", tuple(items or ()))


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiscountResult:
    """Outcome of applying one discount to a base amount."""

    discount_value: Decimal = ZERO
    discount_percentage: Decimal = ZERO
    net_amount: Decimal = ZERO
    is_valid: bool = True
    error_kind: CalculationErrorKind | None = None
    error_message: str | None = None

    @classmethod
    def error(
        cls, kind: CalculationErrorKind, message: str | None = None
    ) -> DiscountResult:
        return cls(
            is_valid=False,
            error_kind=kind,
            error_message=message or kind.default_message,
        )


@dataclass(frozen=True)
class TaxDetails:
    """Audit trail of a single tax rounding decision."""

    base_amount: Decimal
    tax_rate: Decimal
    raw_tax_amount: Decimal
    rounded_tax_amount: Decimal
    rounding_difference: Decimal  # rounded - raw
    effective_tax_rate: Decimal  # rounded / base * 100


@dataclass(frozen=True)
class TaxResult:
    """Outcome of a tax calculation."""

    tax_amount: Decimal = ZERO
    total_including_tax: Decimal = ZERO
    details: TaxDetails | None = None
    is_valid: bool = True
    error_kind: CalculationErrorKind | None = None
    error_message: str | None = None

    @classmethod
    def error(
        cls, kind: CalculationErrorKind, message: str | None = None
    ) -> TaxResult:
        return cls(
            is_valid=False,
            error_kind=kind,
            error_message=message or kind.default_message,
        )


@dataclass(frozen=True)
class LineResult:
    """Gross, discount and net amounts of one invoice line."""

    gross_amount: Decimal = ZERO
    discount_amount: Decimal = ZERO
    net_amount: Decimal = ZERO
    net_unit_price: Decimal = ZERO
    discount_per_unit: Decimal = ZERO
    discount_percentage: Decimal = ZERO
    is_valid: bool = True
    error_kind: CalculationErrorKind | None = None
    error_message: str | None = None

    @classmethod
    def error(
        cls, kind: CalculationErrorKind, message: str | None = None
    ) -> LineResult:
        return cls(
            is_valid=False,
            error_kind=kind,
            error_message=message or kind.default_message,
        )


@dataclass(frozen=True)
class CalculationResult:
    """
    Settled invoice totals.

    When ``is_valid`` is False the amounts are still populated (so the
    editing host can keep showing them) unless the pipeline faulted, in
    which case every amount is zero and ``error_message`` says why.
    """

    sub_total: Decimal = ZERO
    line_discounts: Decimal = ZERO
    global_discount: Decimal = ZERO
    total_discount: Decimal = ZERO
    base_for_tax: Decimal = ZERO
    tax_amount: Decimal = ZERO
    net_total: Decimal = ZERO
    remaining_amount: Decimal = ZERO
    paid_percentage: Decimal = ZERO
    discount_percentage: Decimal = ZERO
    is_valid: bool = True
    error_message: str | None = None
    error_kind: CalculationErrorKind | None = None
    tax_details: TaxDetails | None = None
    line_results: tuple[LineResult, ...] = field(default=())
    failed_invariants: tuple[CalculationInvariant, ...] = field(default=())

    @classmethod
    def error(
        cls,
        message: str,
        kind: CalculationErrorKind = CalculationErrorKind.INVALID_CALCULATION,
    ) -> CalculationResult:
        return cls(is_valid=False, error_message=message, error_kind=kind)
