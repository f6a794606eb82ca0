"""
Feature Engine — Per-number descriptive statistics over a trailing window.

For each candidate number 0-36 this module builds a six-value feature vector
from the last FEATURE_WINDOW spins: recency, frequency, momentum, physical
wheel-neighbour activity, repeated-block score and window entropy.
"""

import math
from collections import Counter
from dataclasses import dataclass, asdict

import numpy as np
from scipy import stats as scipy_stats

from config import (
    TOTAL_NUMBERS, FEATURE_WINDOW, MOMENTUM_MIN_SPINS,
    NEIGHBOUR_ACTIVITY_WINDOW, SEQUENCE_BLOCK_SIZE,
    SEQUENCE_PATTERN_STEP, SEQUENCE_PATTERN_CAP,
    get_wheel_neighbours,
)
from roulette_engine.history import spin_numbers

_MAX_ENTROPY = math.log2(TOTAL_NUMBERS)


@dataclass(frozen=True)
class FeatureVector:
    last_seen: int
    frequency: float
    momentum: float
    neighbor_activity: float
    sequence_pattern: float
    entropy: float

    def to_dict(self):
        d = asdict(self)
        return {
            'lastSeen': d['last_seen'],
            'frequency': d['frequency'],
            'momentum': d['momentum'],
            'neighborActivity': d['neighbor_activity'],
            'sequencePattern': d['sequence_pattern'],
            'entropy': d['entropy'],
        }


class FeatureEngine:
    """Converts a spin history into per-number FeatureVectors."""

    def __init__(self, window_size=FEATURE_WINDOW):
        self.window_size = window_size

    # ── Public API ───────────────────────────────────────────────────

    def window(self, history):
        """Trailing slice of the history used for every feature."""
        numbers = spin_numbers(history)
        if self.window_size:
            return numbers[-self.window_size:]
        return numbers

    def extract(self, number, history):
        """Feature vector for one number over the trailing window."""
        numbers = self.window(history)
        return self._build(number, numbers, self.entropy(numbers))

    def extract_all(self, history):
        """Feature vectors for all 37 numbers, sharing one window pass.

        Returns:
            dict number → FeatureVector
        """
        numbers = self.window(history)
        entropy = self.entropy(numbers)
        return {num: self._build(num, numbers, entropy) for num in range(TOTAL_NUMBERS)}

    # ── Individual features ──────────────────────────────────────────

    @staticmethod
    def last_seen(number, numbers):
        """Spins since `number` last appeared; window length if never."""
        for distance, num in enumerate(reversed(numbers)):
            if num == number:
                return distance
        return len(numbers)

    @staticmethod
    def frequency(number, numbers):
        if not numbers:
            return 0.0
        return numbers.count(number) / len(numbers)

    @staticmethod
    def momentum(number, numbers):
        """Newer-half frequency minus older-half frequency, in [-1, 1]."""
        n = len(numbers)
        if n < MOMENTUM_MIN_SPINS:
            return 0.0

        newer = numbers[-math.ceil(n / 2):]
        older = numbers[:n // 2]
        newer_freq = newer.count(number) / len(newer)
        older_freq = older.count(number) / len(older)
        return newer_freq - older_freq

    @staticmethod
    def neighbor_activity(number, numbers):
        """Fraction of the 4 wheel neighbours seen in the last 10 spins."""
        neighbours = get_wheel_neighbours(number)
        if not neighbours:
            return 0.0
        recent = set(numbers[-NEIGHBOUR_ACTIVITY_WINDOW:])
        hits = sum(1 for n in neighbours if n in recent)
        return hits / len(neighbours)

    @staticmethod
    def sequence_pattern(number, numbers):
        """Score consecutive identical blocks that contain `number`."""
        block = SEQUENCE_BLOCK_SIZE
        score = 0.0
        for i in range(2 * block, len(numbers)):
            current = numbers[i - block:i]
            previous = numbers[i - 2 * block:i - block]
            if current == previous and number in current:
                score += SEQUENCE_PATTERN_STEP
        return min(score, SEQUENCE_PATTERN_CAP)

    @staticmethod
    def entropy(numbers):
        """Shannon entropy of the window, normalized by log2(37)."""
        if not numbers:
            return 0.0
        counts = np.array(list(Counter(numbers).values()), dtype=float)
        return float(scipy_stats.entropy(counts, base=2)) / _MAX_ENTROPY

    # ── Internal ─────────────────────────────────────────────────────

    def _build(self, number, numbers, entropy):
        return FeatureVector(
            last_seen=self.last_seen(number, numbers),
            frequency=self.frequency(number, numbers),
            momentum=self.momentum(number, numbers),
            neighbor_activity=self.neighbor_activity(number, numbers),
            sequence_pattern=self.sequence_pattern(number, numbers),
            entropy=entropy,
        )
