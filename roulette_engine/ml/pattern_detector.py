"""
Pattern Detector — Four independent categorical detectors over recent spins:
color runs, dozen concentration, hot numbers and parity trends.

Each detector returns one pattern variant or None when its minimum-data gate
or threshold is not met. `analyze_all` returns every hit sorted by
probability, highest first.
"""

from collections import Counter
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Union

from config import (
    TOTAL_NUMBERS,
    COLOR_SEQUENCE_MIN_SPINS, COLOR_SEQUENCE_LENGTH,
    COLOR_SEQUENCE_PROBABILITY, COLOR_SEQUENCE_CONFIDENCE,
    DOZEN_WINDOW, DOZEN_MIN_COUNT, DOZEN_BOOST,
    DOZEN_MAX_PROBABILITY, DOZEN_CONFIDENCE,
    HOT_NUMBER_WINDOW, HOT_NUMBER_THRESHOLD, HOT_NUMBER_MIN_COUNT,
    HOT_NUMBER_BOOST, HOT_NUMBER_MAX_PROBABILITY, HOT_NUMBER_CONFIDENCE,
    PARITY_WINDOW, PARITY_MIN_NON_ZERO, PARITY_MIN_COUNT,
    PARITY_PROBABILITY, PARITY_CONFIDENCE,
    get_number_color, get_dozen, get_parity,
)
from roulette_engine.history import spin_numbers

_OPPOSITE = {'red': 'black', 'black': 'red', 'even': 'odd', 'odd': 'even'}


class _PatternMixin:
    type: ClassVar[str] = ''

    def to_dict(self):
        """Wire form. `sequence` is ordered oldest first, like the history."""
        return {
            'type': self.type,
            'sequence': list(self.sequence),
            'targetOutcome': self.target_outcome,
            'probability': self.probability,
            'confidence': self.confidence,
            'totalOccurrences': self.total_occurrences,
            'successCount': self.success_count,
            'description': self.description,
            'suggestion': self.suggestion,
        }


@dataclass(frozen=True)
class ColorSequencePattern(_PatternMixin):
    type: ClassVar[str] = 'color_sequence'

    sequence: tuple                    # the run's colors, most recent last
    target_outcome: str                # opposite color
    probability: float
    confidence: float
    total_occurrences: int
    success_count: int

    @property
    def description(self):
        return f"{self.sequence[0].capitalize()} run of {len(self.sequence)}"

    @property
    def suggestion(self):
        return f"Bet on {self.target_outcome.capitalize()}"


@dataclass(frozen=True)
class DozenHotPattern(_PatternMixin):
    type: ClassVar[str] = 'dozen_hot'

    dozen: int
    probability: float
    confidence: float
    total_occurrences: int
    success_count: int

    @property
    def sequence(self):
        return (f"dozen_{self.dozen}",)

    @property
    def target_outcome(self):
        return f"dozen_{self.dozen}"

    @property
    def description(self):
        return f"Dozen {self.dozen} is hot"

    @property
    def suggestion(self):
        low = (self.dozen - 1) * 12 + 1
        return f"Bet on dozen {self.dozen} ({low}-{self.dozen * 12})"


@dataclass(frozen=True)
class HotNumberPattern(_PatternMixin):
    type: ClassVar[str] = 'hot_number'

    number: int
    probability: float
    confidence: float
    total_occurrences: int
    success_count: int

    @property
    def sequence(self):
        return (self.number,)

    @property
    def target_outcome(self):
        return self.number

    @property
    def description(self):
        return f"Number {self.number} is hot"

    @property
    def suggestion(self):
        return f"Consider a straight-up bet on {self.number}"


@dataclass(frozen=True)
class ParityTrendPattern(_PatternMixin):
    type: ClassVar[str] = 'parity_trend'

    dominant: str                      # 'even' | 'odd'
    probability: float
    confidence: float
    total_occurrences: int
    success_count: int

    @property
    def sequence(self):
        return (self.dominant,)

    @property
    def target_outcome(self):
        return _OPPOSITE[self.dominant]

    @property
    def description(self):
        return f"{self.dominant.capitalize()} trend"

    @property
    def suggestion(self):
        return f"Consider a bet on {self.target_outcome.capitalize()}"


PatternResult = Union[ColorSequencePattern, DozenHotPattern, HotNumberPattern, ParityTrendPattern]


class PatternDetector:

    def analyze_color_sequence(self, history) -> Optional[ColorSequencePattern]:
        numbers = spin_numbers(history)
        if len(numbers) < COLOR_SEQUENCE_MIN_SPINS:
            return None

        colors = tuple(get_number_color(n) for n in numbers[-COLOR_SEQUENCE_LENGTH:])
        if colors[0] == 'green' or any(c != colors[0] for c in colors):
            return None

        return ColorSequencePattern(
            sequence=colors,
            target_outcome=_OPPOSITE[colors[0]],
            probability=COLOR_SEQUENCE_PROBABILITY,
            confidence=COLOR_SEQUENCE_CONFIDENCE,
            total_occurrences=len(colors),
            success_count=len(colors),
        )

    def analyze_dozens(self, history) -> Optional[DozenHotPattern]:
        numbers = spin_numbers(history)
        if len(numbers) < DOZEN_WINDOW:
            return None

        recent = numbers[-DOZEN_WINDOW:]
        # Counter keeps first-seen order; walk newest first so ties go to
        # the dozen that appeared most recently
        counts = Counter(get_dozen(n) for n in reversed(recent) if n != 0)

        hot_dozen, max_count = None, 0
        for dozen, count in counts.items():
            if count > max_count:
                hot_dozen, max_count = dozen, count

        if max_count < DOZEN_MIN_COUNT:
            return None

        return DozenHotPattern(
            dozen=hot_dozen,
            probability=min(max_count / len(recent) * DOZEN_BOOST, DOZEN_MAX_PROBABILITY),
            confidence=DOZEN_CONFIDENCE,
            total_occurrences=len(recent),
            success_count=max_count,
        )

    def analyze_hot_numbers(self, history) -> Optional[HotNumberPattern]:
        numbers = spin_numbers(history)
        if len(numbers) < HOT_NUMBER_WINDOW:
            return None

        recent = numbers[-HOT_NUMBER_WINDOW:]
        counts = Counter(reversed(recent))
        expected = len(recent) / TOTAL_NUMBERS

        hot_number, max_count = None, 0
        for number, count in counts.items():
            if count > expected * HOT_NUMBER_THRESHOLD and count > max_count:
                hot_number, max_count = number, count

        if hot_number is None or max_count < HOT_NUMBER_MIN_COUNT:
            return None

        return HotNumberPattern(
            number=hot_number,
            probability=min(max_count / len(recent) * HOT_NUMBER_BOOST, HOT_NUMBER_MAX_PROBABILITY),
            confidence=HOT_NUMBER_CONFIDENCE,
            total_occurrences=len(recent),
            success_count=max_count,
        )

    def detect_parity(self, history) -> Optional[ParityTrendPattern]:
        numbers = spin_numbers(history)
        if len(numbers) < PARITY_WINDOW:
            return None

        non_zero = [n for n in numbers[-PARITY_WINDOW:] if n != 0]
        if len(non_zero) < PARITY_MIN_NON_ZERO:
            return None

        parities = Counter(get_parity(n) for n in non_zero)
        even_count = parities.get('even', 0)
        odd_count = parities.get('odd', 0)
        if even_count < PARITY_MIN_COUNT and odd_count < PARITY_MIN_COUNT:
            return None

        dominant = 'even' if even_count > odd_count else 'odd'
        return ParityTrendPattern(
            dominant=dominant,
            probability=PARITY_PROBABILITY,
            confidence=PARITY_CONFIDENCE,
            total_occurrences=len(non_zero),
            success_count=max(even_count, odd_count),
        )

    def analyze_all(self, history) -> List[PatternResult]:
        detectors = (
            self.analyze_color_sequence,
            self.analyze_dozens,
            self.analyze_hot_numbers,
            self.detect_parity,
        )
        patterns = [p for p in (detect(history) for detect in detectors) if p is not None]
        return sorted(patterns, key=lambda p: p.probability, reverse=True)

    def get_summary(self, history):
        numbers = spin_numbers(history)
        recent = numbers[-HOT_NUMBER_WINDOW:]
        return {
            'total_spins': len(numbers),
            'colors': dict(Counter(get_number_color(n) for n in recent)),
            'dozens': {f"dozen_{d}": c for d, c in sorted(Counter(
                get_dozen(n) for n in recent if n != 0).items())},
            'parity': dict(Counter(get_parity(n) for n in recent if n != 0)),
            'patterns': [p.to_dict() for p in self.analyze_all(numbers)],
        }
