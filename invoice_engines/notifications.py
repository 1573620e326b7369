"""
invoice_engines.notifications -- Change notifications for calculation results.

Responsibility:
    Deliver a ``CalculationChangedEvent`` to every registered listener after
    an invoice total has been computed.  Delivery is synchronous and runs on
    the caller's thread, in registration order.

Architecture position:
    Engines -- the only piece of the engine that holds mutable state (the
    listener list).  Calculators never touch it.

Invariants enforced:
    - Listener isolation: each listener call is wrapped; an exception is
      logged and the remaining listeners still run.  A listener can never
      change or abort the calculation that triggered it.
    - Dispatch iterates over a snapshot of the listener list, so a listener
      may unsubscribe itself (or others) mid-dispatch.

Failure modes:
    - A raising listener produces one ``calculation_listener_failed`` ERROR
      log record with traceback; ``publish`` returns the count of
      successful deliveries.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from invoice_kernel.logging_config import get_logger

logger = get_logger("engines.notifications")


class CalculationType(str, Enum):
    """Which calculation produced the event."""

    INVOICE_TOTAL = "invoice_total"
    LINE_TOTAL = "line_total"
    DISCOUNT = "discount"
    TAX = "tax"


@dataclass(frozen=True)
class CalculationChangedEvent:
    """Published after a calculation completes."""

    calculation_type: CalculationType
    result: Any
    is_valid: bool
    timestamp: datetime


CalculationListener = Callable[[CalculationChangedEvent], None]


class CalculationListenerRegistry:
    """Thread-safe list of calculation listeners."""

    def __init__(self) -> None:
        self._listeners: list[CalculationListener] = []
        self._lock = threading.Lock()

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def add_listener(self, listener: CalculationListener) -> None:
        """Register ``listener``; registering it twice delivers twice."""
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: CalculationListener) -> bool:
        """Unregister one registration of ``listener``. False if it was not registered."""
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                return False
        return True

    def publish(self, event: CalculationChangedEvent) -> int:
        """Deliver ``event`` to every listener; return the number that succeeded."""
        with self._lock:
            snapshot = tuple(self._listeners)

        delivered = 0
        for listener in snapshot:
            try:
                listener(event)
            except Exception:
                logger.exception("calculation_listener_failed", extra={
                    "listener": getattr(listener, "__qualname__", repr(listener)),
                    "calculation_type": event.calculation_type.value,
                })
                continue
            delivered += 1
        return delivered
