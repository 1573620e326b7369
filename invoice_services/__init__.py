"""
invoice_services -- Package init and public API.

Responsibility:
    Host-side adapters that compose the pure calculation engine with
    configuration and presentation: settings-aware input building and
    currency formatting.

Architecture position:
    Services -- orchestration over engines + config.

    Dependency direction (enforced by tests/architecture/test_import_boundaries.py):
        invoice_services/ -> invoice_engines/  (allowed)
        invoice_services/ -> invoice_config/   (allowed)
        invoice_engines/  -> invoice_services/ (FORBIDDEN)
        invoice_kernel/   -> invoice_services/ (FORBIDDEN)
"""

from invoice_services.calculation_service import InvoiceCalculationService
from invoice_services.formatting import CurrencyFormatter

__all__ = [
    "CurrencyFormatter",
    "InvoiceCalculationService",
]
