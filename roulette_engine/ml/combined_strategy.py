"""
Combined Strategy — Balanced multi-bet portfolio built from ranked predictions.

Allocation slices (skipped, not rebalanced, when a slice has no targets):
  - straight_up 50%: top 5 hot numbers
  - neighbors   25%: wheel neighbours (±2) of the top 2 cold numbers
  - dozens      15%: dozen hit most over the last 15 spins
  - colors      10%: color leading over the last 10 spins (black on a tie)

Also hosts the straight-up number generator, whose random fill uses an
injectable random source.
"""

import random
import time
from collections import Counter
from dataclasses import dataclass
from typing import ClassVar

from config import (
    TOTAL_NUMBERS, RED_NUMBERS, BLACK_NUMBERS, DOZENS, PAYOUTS,
    MIN_STRATEGY_SPINS,
    STRAIGHT_UP_PERCENTAGE, NEIGHBORS_PERCENTAGE,
    DOZENS_PERCENTAGE, COLORS_PERCENTAGE,
    STRATEGY_HOT_COUNT, STRATEGY_COLD_COUNT,
    STRATEGY_DOZEN_WINDOW, STRATEGY_COLOR_WINDOW,
    STRATEGY_RISK_LEVEL, STRATEGY_DEFAULT_CONFIDENCE, TOP_PREDICTIONS_COUNT,
    STRAIGHT_UP_DEFAULT_NUMBERS, STRAIGHT_UP_MIN_SPINS, STRAIGHT_UP_COUNT,
    STRAIGHT_UP_HOT_WINDOW, STRAIGHT_UP_HOT_COUNT,
    STRAIGHT_UP_COLD_WINDOW, STRAIGHT_UP_COLD_COUNT,
    get_wheel_neighbours,
)
from roulette_engine.history import spin_numbers
from roulette_engine.ml.ensemble import PredictionRanker


# ─── Allocation Variants ──────────────────────────────────────────────

class _AllocationMixin:
    type: ClassVar[str] = ''
    percentage: ClassVar[int] = 0
    expected_payout: ClassVar[int] = 0
    reasoning: ClassVar[str] = ''

    @property
    def expected_return(self):
        """Weighted return of this slice: share × hit chance × payout."""
        return (self.percentage / 100) * (len(self.numbers) / TOTAL_NUMBERS) * self.expected_payout

    def to_dict(self):
        return {
            'type': self.type,
            'percentage': self.percentage,
            'numbers': list(self.numbers),
            'reasoning': self.reasoning,
            'expectedPayout': self.expected_payout,
        }


@dataclass(frozen=True)
class StraightUpAllocation(_AllocationMixin):
    type: ClassVar[str] = 'straight_up'
    percentage: ClassVar[int] = STRAIGHT_UP_PERCENTAGE
    expected_payout: ClassVar[int] = PAYOUTS['straight']
    reasoning: ClassVar[str] = 'Hot numbers with high ensemble probability'

    numbers: tuple


@dataclass(frozen=True)
class NeighborsAllocation(_AllocationMixin):
    type: ClassVar[str] = 'neighbors'
    percentage: ClassVar[int] = NEIGHBORS_PERCENTAGE
    expected_payout: ClassVar[int] = PAYOUTS['neighbors']
    reasoning: ClassVar[str] = 'Neighbours of cold numbers, expecting reversion'

    centers: tuple                     # the cold numbers being expanded
    numbers: tuple


@dataclass(frozen=True)
class DozensAllocation(_AllocationMixin):
    type: ClassVar[str] = 'dozens'
    percentage: ClassVar[int] = DOZENS_PERCENTAGE
    expected_payout: ClassVar[int] = PAYOUTS['dozen']
    reasoning: ClassVar[str] = 'Dozen with the best recent performance'

    dozen: int

    @property
    def numbers(self):
        return tuple(sorted(DOZENS[self.dozen]))


@dataclass(frozen=True)
class ColorsAllocation(_AllocationMixin):
    type: ClassVar[str] = 'colors'
    percentage: ClassVar[int] = COLORS_PERCENTAGE
    expected_payout: ClassVar[int] = PAYOUTS['red_black']
    reasoning: ClassVar[str] = 'Color with the favourable trend'

    color: str                         # 'red' | 'black'

    @property
    def numbers(self):
        return tuple(sorted(RED_NUMBERS if self.color == 'red' else BLACK_NUMBERS))


@dataclass
class CombinedStrategy:
    id: str
    name: str
    description: str
    allocations: list
    expected_return: float
    risk_level: str
    confidence: float

    @property
    def coverage(self):
        """Bet targets across all slices as a fraction of the wheel."""
        return sum(len(a.numbers) for a in self.allocations) / TOTAL_NUMBERS

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'allocations': [a.to_dict() for a in self.allocations],
            'expectedReturn': self.expected_return,
            'riskLevel': self.risk_level,
            'confidence': self.confidence,
        }


# ─── Strategy Allocator ───────────────────────────────────────────────

class StrategyAllocator:
    def __init__(self, ranker=None):
        self.ranker = ranker or PredictionRanker()

    def generate_optimal_strategy(self, history, predictions=None):
        """Balanced portfolio, or None with fewer than 25 spins."""
        numbers = spin_numbers(history)
        if len(numbers) < MIN_STRATEGY_SPINS:
            return None

        if predictions is None:
            predictions = self.ranker.analyze_predictions(numbers)
        return self.generate_balanced_strategy(predictions, numbers)

    def generate_balanced_strategy(self, predictions, history):
        numbers = spin_numbers(history)
        allocations = []

        hot = [p.number for p in predictions if p.category == 'hot'][:STRATEGY_HOT_COUNT]
        if hot:
            allocations.append(StraightUpAllocation(numbers=tuple(hot)))

        cold = [p.number for p in predictions if p.category == 'cold'][:STRATEGY_COLD_COUNT]
        if cold:
            allocations.append(NeighborsAllocation(
                centers=tuple(cold),
                numbers=tuple(self.neighbors_of(cold)),
            ))

        allocations.append(DozensAllocation(dozen=self.best_dozen(numbers)))
        allocations.append(ColorsAllocation(color=self.color_trend(numbers)))

        return CombinedStrategy(
            id=f"balanced_{int(time.time() * 1000)}",
            name='Balanced ML Strategy',
            description='Balanced combination driven by the prediction ensemble',
            allocations=allocations,
            expected_return=self.expected_return(allocations),
            risk_level=STRATEGY_RISK_LEVEL,
            confidence=self.overall_confidence(predictions),
        )

    # ── Helpers ───────────────────────────────────────────────────────

    @staticmethod
    def neighbors_of(numbers):
        """Union of wheel neighbours, in first-seen order."""
        seen = []
        for num in numbers:
            for neighbour in get_wheel_neighbours(num):
                if neighbour not in seen:
                    seen.append(neighbour)
        return seen

    @staticmethod
    def best_dozen(numbers):
        """Dozen with most hits in the last 15 spins; ties go to the higher dozen."""
        recent = numbers[-STRATEGY_DOZEN_WINDOW:]
        counts = {dozen: sum(1 for n in recent if n in members) for dozen, members in DOZENS.items()}
        best = 1
        for dozen in (2, 3):
            if counts[dozen] >= counts[best]:
                best = dozen
        return best

    @staticmethod
    def color_trend(numbers):
        recent = numbers[-STRATEGY_COLOR_WINDOW:]
        red = sum(1 for n in recent if n in RED_NUMBERS)
        black = sum(1 for n in recent if n in BLACK_NUMBERS)
        return 'red' if red > black else 'black'

    @staticmethod
    def expected_return(allocations):
        return sum(a.expected_return for a in allocations)

    @staticmethod
    def overall_confidence(predictions):
        if not predictions:
            return STRATEGY_DEFAULT_CONFIDENCE
        top = predictions[:TOP_PREDICTIONS_COUNT]
        return sum(p.confidence for p in top) / len(top)


# ─── Straight-Up Number Generator ─────────────────────────────────────

def generate_straight_up_numbers(history, rng=None):
    """Seven straight-up picks: 3 hot, 2 cold, the rest drawn at random.

    The random fill is intentionally non-deterministic; pass a seeded
    `random.Random` to reproduce a draw.
    """
    numbers = spin_numbers(history)
    if len(numbers) < STRAIGHT_UP_MIN_SPINS:
        return list(STRAIGHT_UP_DEFAULT_NUMBERS)

    rng = rng or random.Random()
    chosen = []

    # most_common is stable, so ties keep the most recently seen number first
    counts = Counter(n for n in reversed(numbers[-STRAIGHT_UP_HOT_WINDOW:]) if n != 0)
    for num, _ in counts.most_common(STRAIGHT_UP_HOT_COUNT):
        chosen.append(num)

    recent = set(numbers[-STRAIGHT_UP_COLD_WINDOW:])
    all_numbers = list(range(1, TOTAL_NUMBERS))
    cold = [n for n in all_numbers if n not in recent]
    for num in cold[:STRAIGHT_UP_COLD_COUNT]:
        if num not in chosen:
            chosen.append(num)

    remaining = [n for n in all_numbers if n not in chosen]
    while len(chosen) < STRAIGHT_UP_COUNT and remaining:
        chosen.append(remaining.pop(rng.randrange(len(remaining))))

    return chosen[:STRAIGHT_UP_COUNT]
