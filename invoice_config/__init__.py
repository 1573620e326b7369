"""
invoice_config -- single public entrypoint for calculation settings.

Responsibility:
    Provides ``get_active_settings()``, the way an editing host obtains its
    default tax rate, tax-base policy, rounding mode and currency display
    settings.  Settings files are YAML documents under ``sets/``.

Architecture position:
    Configuration -- sits above ``invoice_kernel`` and ``invoice_engines``.
    Neither of those packages may import from ``invoice_config``; the host
    (or ``invoice_services``) copies settings into ``CalculationInput``.

Failure modes:
    - ``FileNotFoundError`` -- no settings file for the requested id.
    - ``yaml.YAMLError`` -- malformed YAML.
    - ``ConfigurationError`` -- missing/invalid keys, or a file whose
      ``settings_id`` does not match its name.
    - ``InvalidRoundingModeError`` -- unknown ``tax.rounding_mode``.

Audit relevance:
    Every successful call emits an ``INVOICE_CONFIG_TRACE`` log record with
    the settings id and checksum, tying totals computed afterwards to the
    exact settings that produced them.
"""

from __future__ import annotations

from pathlib import Path

from invoice_config.loader import load_settings
from invoice_config.schema import (
    CalculationSettings,
    CurrencySettings,
    SymbolPosition,
    TaxSettings,
)
from invoice_kernel.exceptions import ConfigurationError
from invoice_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default settings directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_active_settings(
    settings_id: str = "default",
    config_dir: Path | None = None,
) -> CalculationSettings:
    """Load the settings file ``<config_dir>/<settings_id>.yaml``.

    Args:
        settings_id: Name of the settings file without extension.
        config_dir: Override path to the settings directory.
            Defaults to invoice_config/sets/.

    Returns:
        CalculationSettings parsed from the file.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{settings_id}.yaml"

    settings = load_settings(path)
    if settings.settings_id != settings_id:
        raise ConfigurationError(
            f"Settings file {path.name} declares settings_id "
            f"{settings.settings_id!r}, expected {settings_id!r}",
            key="settings_id",
            source=str(path),
        )

    _logger.info(
        "INVOICE_CONFIG_TRACE",
        extra={
            "trace_type": "INVOICE_CONFIG_TRACE",
            "settings_id": settings.settings_id,
            "checksum": settings.checksum,
            "tax_rate_percent": str(settings.tax.rate_percent),
            "rounding_mode": settings.tax.rounding_mode.value,
            "currency_code": settings.currency.code,
        },
    )
    return settings


def list_settings(config_dir: Path | None = None) -> list[str]:
    """Ids of every settings file in the directory, sorted."""
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    return sorted(p.stem for p in sets_dir.glob("*.yaml"))


__all__ = [
    "CalculationSettings",
    "CurrencySettings",
    "SymbolPosition",
    "TaxSettings",
    "get_active_settings",
    "list_settings",
]
