"""
Invoice Kernel - shared primitives for the invoice calculation engine.

Provides:
- Structured JSON logging with request-scoped context
- Typed exceptions with machine-readable codes
- Error kinds and invariant catalogue for calculation results
- Decimal money helpers and an injectable clock

Nothing in this package performs I/O.
"""

__version__ = "0.1.0"
