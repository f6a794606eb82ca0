"""
Event History - Outcome records and the append-only spin log.

Histories are oldest-first: index -1 is the most recent spin. The engine only
reads snapshots; appending is the job of the service layer.
"""

import threading
import time
from dataclasses import dataclass, asdict

from config import (
    TOTAL_NUMBERS, HISTORY_LIMIT,
    get_number_color, get_dozen, get_column, get_half, get_parity,
)


class InvalidOutcomeError(ValueError):
    """Raised when a spin result is not an integer in 0-36."""


@dataclass(frozen=True)
class OutcomeRecord:
    number: int
    color: str
    dozen: object
    column: object
    half: object
    parity: object
    timestamp: float

    def to_dict(self):
        return asdict(self)


def make_outcome(number, timestamp=None):
    """Validate a raw spin and derive its table properties."""
    if isinstance(number, bool) or not isinstance(number, int):
        raise InvalidOutcomeError(f"Spin must be an integer, got {number!r}")
    if not 0 <= number < TOTAL_NUMBERS:
        raise InvalidOutcomeError(f"Spin must be between 0 and {TOTAL_NUMBERS - 1}, got {number}")

    return OutcomeRecord(
        number=number,
        color=get_number_color(number),
        dozen=get_dozen(number),
        column=get_column(number),
        half=get_half(number),
        parity=get_parity(number),
        timestamp=time.time() if timestamp is None else timestamp,
    )


def spin_numbers(history):
    """Reduce a history of OutcomeRecords (or bare ints) to a list of ints."""
    return [getattr(item, 'number', item) for item in history]


class EventHistory:
    """Append-only in-memory spin log with snapshot reads."""

    def __init__(self, max_size=HISTORY_LIMIT):
        self.max_size = max_size
        self._records = []
        self._lock = threading.Lock()

    def append(self, number, timestamp=None):
        with self._lock:
            return self._append(number, timestamp)

    def extend(self, numbers):
        """Validate a batch first, then store it under one lock acquisition."""
        numbers = list(numbers)
        for number in numbers:
            make_outcome(number, timestamp=0.0)
        with self._lock:
            return [self._append(n) for n in numbers]

    def _append(self, number, timestamp=None):
        if timestamp is None:
            timestamp = time.time()
        if self._records:
            # Timestamps never go backwards, whatever the clock or caller says
            timestamp = max(timestamp, self._records[-1].timestamp)
        record = make_outcome(number, timestamp)
        self._records.append(record)
        if self.max_size and len(self._records) > self.max_size:
            del self._records[:len(self._records) - self.max_size]
        return record

    def snapshot(self, limit=None):
        """Immutable copy of the most recent `limit` records (all if None)."""
        with self._lock:
            records = self._records if not limit else self._records[-limit:]
            return tuple(records)

    def numbers(self, limit=None):
        return spin_numbers(self.snapshot(limit))

    def clear(self):
        with self._lock:
            count = len(self._records)
            self._records = []
        return count

    def __len__(self):
        return len(self._records)
