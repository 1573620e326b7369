"""
Settings Loader (``invoice_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into typed
``invoice_config.schema`` dataclass instances.  Hosts normally go through
``invoice_config.get_active_settings()``; ``load_settings`` is exposed for
tests and tooling that point at an explicit file.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Required keys have no silent defaults: a missing ``tax.rate_percent`` or
  ``currency.code`` raises ``ConfigurationError``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  content, independent of key order and YAML formatting.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing or invalid keys  -> ``ConfigurationError``.
* Unknown rounding mode  -> ``InvalidRoundingModeError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from invoice_config.schema import (
    CalculationSettings,
    CurrencySettings,
    SymbolPosition,
    TaxSettings,
)
from invoice_engines.types import RoundingMode
from invoice_kernel.domain.values import ZERO, to_decimal
from invoice_kernel.exceptions import ConfigurationError, InvalidAmountError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Settings file must contain a mapping, got {type(data).__name__}",
            source=str(path),
        )
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON form of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str, ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _require(data: dict[str, Any], key: str, section: str, source: str | None) -> Any:
    if key not in data or data[key] is None:
        raise ConfigurationError(
            f"Missing required setting: {section}.{key}",
            key=f"{section}.{key}",
            source=source,
        )
    return data[key]


def _section(data: dict[str, Any], name: str, source: str | None) -> dict[str, Any]:
    section = _require(data, name, "settings", source)
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Setting section {name!r} must be a mapping",
            key=name,
            source=source,
        )
    return section


def parse_tax_settings(data: dict[str, Any], source: str | None = None) -> TaxSettings:
    """Parse the ``tax`` section."""
    raw_rate = _require(data, "rate_percent", "tax", source)
    try:
        rate = to_decimal(raw_rate, "tax.rate_percent")
    except InvalidAmountError as exc:
        raise ConfigurationError(str(exc), key="tax.rate_percent", source=source) from exc
    if rate < ZERO:
        raise ConfigurationError(
            f"tax.rate_percent cannot be negative: {rate}",
            key="tax.rate_percent",
            source=source,
        )

    return TaxSettings(
        rate_percent=rate,
        on_net_of_discount=bool(data.get("on_net_of_discount", True)),
        rounding_mode=RoundingMode.parse(data.get("rounding_mode", "normal"), source=source),
    )


def parse_currency_settings(data: dict[str, Any], source: str | None = None) -> CurrencySettings:
    """Parse the ``currency`` section."""
    decimal_places = data.get("decimal_places", 2)
    if isinstance(decimal_places, bool) or not isinstance(decimal_places, int) or not 0 <= decimal_places <= 4:
        raise ConfigurationError(
            f"currency.decimal_places must be an integer between 0 and 4, got {decimal_places!r}",
            key="currency.decimal_places",
            source=source,
        )

    position = data.get("symbol_position", SymbolPosition.SUFFIX.value)
    try:
        symbol_position = SymbolPosition(str(position).lower())
    except ValueError as exc:
        raise ConfigurationError(
            f"currency.symbol_position must be 'prefix' or 'suffix', got {position!r}",
            key="currency.symbol_position",
            source=source,
        ) from exc

    code = str(_require(data, "code", "currency", source)).upper()
    return CurrencySettings(
        code=code,
        symbol=str(data.get("symbol") or code),
        decimal_places=decimal_places,
        symbol_position=symbol_position,
        thousands_separator=str(data.get("thousands_separator", ",")),
        decimal_separator=str(data.get("decimal_separator", ".")),
    )


def parse_settings(data: dict[str, Any], source: str | None = None) -> CalculationSettings:
    """
    Parse a full ``CalculationSettings`` from a dict.

    Raises:
        ConfigurationError: if required keys are missing or invalid.
    """
    settings_id = str(_require(data, "settings_id", "settings", source))
    return CalculationSettings(
        settings_id=settings_id,
        tax=parse_tax_settings(_section(data, "tax", source), source),
        currency=parse_currency_settings(_section(data, "currency", source), source),
        checksum=compute_checksum(data),
    )


def load_settings(path: Path) -> CalculationSettings:
    """Load and parse one settings file."""
    return parse_settings(load_yaml_file(path), source=str(path))


def settings_to_dict(settings: CalculationSettings) -> dict[str, Any]:
    """Serialise settings back to the YAML-shaped dict ``parse_settings`` accepts."""
    return {
        "settings_id": settings.settings_id,
        "tax": {
            "rate_percent": str(settings.tax.rate_percent),
            "on_net_of_discount": settings.tax.on_net_of_discount,
            "rounding_mode": settings.tax.rounding_mode.value,
        },
        "currency": {
            "code": settings.currency.code,
            "symbol": settings.currency.symbol,
            "decimal_places": settings.currency.decimal_places,
            "symbol_position": settings.currency.symbol_position.value,
            "thousands_separator": settings.currency.thousands_separator,
            "decimal_separator": settings.currency.decimal_separator,
        },
    }


def dump_settings(settings: CalculationSettings, path: Path) -> None:
    """Write settings as YAML."""
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(settings_to_dict(settings), f, allow_unicode=True, sort_keys=False)
