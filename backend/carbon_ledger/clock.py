"""
Ledger clocks.

A clock hands out strictly increasing ticks. Ticks order operations and
stand in for "time" in every record and derived identifier, which keeps the
ledger deterministic under replay.
"""

import threading
from abc import ABC, abstractmethod

from .models import LedgerSequence


class LedgerClock(ABC):
    """Source of monotonically increasing ticks."""

    @abstractmethod
    def tick(self) -> int:
        """Advance the clock and return the new tick."""

    @abstractmethod
    def current(self) -> int:
        """Return the latest tick without advancing."""


class DatabaseClock(LedgerClock):
    """
    Clock persisted in the ``LedgerSequence`` row.

    Must be called inside the operation's ``transaction.atomic()`` block so a
    rolled back operation does not consume a tick.
    """

    def tick(self) -> int:
        LedgerSequence.objects.get_or_create(pk=LedgerSequence.SINGLETON_PK)
        sequence = LedgerSequence.objects.select_for_update().get(pk=LedgerSequence.SINGLETON_PK)
        sequence.value += 1
        sequence.save(update_fields=['value'])
        return sequence.value

    def current(self) -> int:
        sequence = LedgerSequence.objects.filter(pk=LedgerSequence.SINGLETON_PK).first()
        return sequence.value if sequence else 0


class CounterClock(LedgerClock):
    """In-memory clock for replay and tests."""

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    def tick(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def current(self) -> int:
        return self._value
