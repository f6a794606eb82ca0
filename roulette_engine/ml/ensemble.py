"""
Ensemble Predictor - Combines Markov, Bayesian, frequency and momentum
signals into one probability and an agreement-based confidence per number.

Pipeline per number: FeatureEngine → MarkovChain / BayesianEstimator →
EnsembleScorer. PredictionRanker runs it for all 37 numbers and sorts the
result by probability (ties by ascending number).
"""

from dataclasses import dataclass, field

import numpy as np

from config import (
    TOTAL_NUMBERS, MIN_PREDICTION_SPINS, TOP_PREDICTIONS_COUNT,
    ENSEMBLE_MARKOV_WEIGHT, ENSEMBLE_BAYESIAN_WEIGHT,
    ENSEMBLE_FREQUENCY_WEIGHT, ENSEMBLE_MOMENTUM_WEIGHT,
    HOT_PROBABILITY_THRESHOLD, HOT_FREQUENCY_THRESHOLD,
    COLD_PROBABILITY_THRESHOLD, COLD_LAST_SEEN_THRESHOLD,
    REASON_FREQUENCY_THRESHOLD, REASON_LAST_SEEN_THRESHOLD,
    REASON_MOMENTUM_THRESHOLD, REASON_NEIGHBOUR_THRESHOLD,
    REASON_MARKOV_THRESHOLD,
    NEIGHBOR_GROUP_CANDIDATES, NEIGHBOR_GROUP_WEIGHT,
    NEIGHBOR_GROUP_MIN_PROBABILITY, NEIGHBOR_GROUP_MAX,
    NEIGHBOURS_PER_SIDE, NUMBER_TO_POSITION, WHEEL_ORDER,
)
from roulette_engine.history import spin_numbers
from roulette_engine.ml.feature_engine import FeatureEngine
from roulette_engine.ml.markov_chain import MarkovChain
from roulette_engine.ml.bayesian import BayesianEstimator


def _clamp(value, low=0.0, high=1.0):
    return min(max(value, low), high)


@dataclass
class Prediction:
    number: int
    probability: float
    confidence: float
    category: str                      # 'hot' | 'cold' | 'neutral'
    reasoning: list = field(default_factory=list)

    def to_dict(self):
        return {
            'number': self.number,
            'probability': self.probability,
            'confidence': self.confidence,
            'category': self.category,
            'reasoning': list(self.reasoning),
        }


@dataclass
class NeighborGroup:
    number: int
    neighbors: list
    total_probability: float
    reasoning: str

    def to_dict(self):
        return {
            'number': self.number,
            'neighbors': list(self.neighbors),
            'totalProbability': self.total_probability,
            'reasoning': self.reasoning,
        }


# ─── Ensemble Scorer ──────────────────────────────────────────────────

class EnsembleScorer:
    WEIGHTS = {
        'markov': ENSEMBLE_MARKOV_WEIGHT,
        'bayesian': ENSEMBLE_BAYESIAN_WEIGHT,
        'frequency': ENSEMBLE_FREQUENCY_WEIGHT,
        'momentum': ENSEMBLE_MOMENTUM_WEIGHT,
    }

    def component_scores(self, features, markov_prob, bayesian_prob):
        """The four ensemble inputs, each mapped into [0, 1]."""
        return {
            'markov': _clamp(markov_prob),
            'bayesian': _clamp(bayesian_prob),
            'frequency': _clamp(features.frequency * TOTAL_NUMBERS),
            'momentum': (features.momentum + 1) / 2,
        }

    def score(self, features, markov_prob, bayesian_prob):
        """Weighted probability plus confidence from cross-method agreement.

        Returns:
            (probability, confidence), both in [0, 1]
        """
        scores = self.component_scores(features, markov_prob, bayesian_prob)
        raw = sum(self.WEIGHTS[name] * value for name, value in scores.items())

        variance = float(np.var(list(scores.values())))
        confidence = max(0.0, 1.0 - variance * 2)

        return _clamp(raw), confidence

    @staticmethod
    def classify(features, probability):
        if probability > HOT_PROBABILITY_THRESHOLD and features.frequency > HOT_FREQUENCY_THRESHOLD:
            return 'hot'
        if probability < COLD_PROBABILITY_THRESHOLD and features.last_seen > COLD_LAST_SEEN_THRESHOLD:
            return 'cold'
        return 'neutral'

    @staticmethod
    def reasoning(features, markov_prob):
        reasons = []
        if features.frequency > REASON_FREQUENCY_THRESHOLD:
            reasons.append(f"High frequency: {features.frequency * 100:.1f}%")
        if features.last_seen > REASON_LAST_SEEN_THRESHOLD:
            reasons.append(f"Not seen for {features.last_seen} spins")
        if features.momentum > REASON_MOMENTUM_THRESHOLD:
            reasons.append("Rising recent trend")
        if features.neighbor_activity > REASON_NEIGHBOUR_THRESHOLD:
            reasons.append("Physical wheel neighbours active")
        if markov_prob > REASON_MARKOV_THRESHOLD:
            reasons.append("Sequential pattern detected")
        if not reasons:
            reasons.append("Standard statistical analysis")
        return reasons


# ─── Prediction Ranker ────────────────────────────────────────────────

class PredictionRanker:
    def __init__(self, feature_engine=None, markov=None, bayesian=None, scorer=None):
        self.features = feature_engine or FeatureEngine()
        self.markov = markov or MarkovChain()
        self.bayesian = bayesian or BayesianEstimator()
        self.scorer = scorer or EnsembleScorer()

    def predict_number(self, number, history):
        """Single-number pipeline; no minimum-data gate."""
        features = self.features.extract(number, history)
        markov_prob = self.markov.probability(number, history)
        return self._predict(number, features, markov_prob)

    def analyze_predictions(self, history):
        """All 37 predictions sorted by probability, or [] below 20 spins."""
        numbers = spin_numbers(history)
        if len(numbers) < MIN_PREDICTION_SPINS:
            return []

        feature_map = self.features.extract_all(numbers)
        markov_probs = self.markov.get_probabilities(numbers)

        predictions = [
            self._predict(num, feature_map[num], float(markov_probs[num]))
            for num in range(TOTAL_NUMBERS)
        ]
        predictions.sort(key=lambda p: (-p.probability, p.number))
        return predictions

    def _predict(self, number, features, markov_prob):
        bayesian_prob = self.bayesian.probability(features)
        probability, confidence = self.scorer.score(features, markov_prob, bayesian_prob)
        return Prediction(
            number=number,
            probability=probability,
            confidence=confidence,
            category=self.scorer.classify(features, probability),
            reasoning=self.scorer.reasoning(features, markov_prob),
        )

    # ── Subsets ──────────────────────────────────────────────────────

    @staticmethod
    def top_predictions(predictions, top_n=TOP_PREDICTIONS_COUNT):
        return predictions[:top_n]

    @staticmethod
    def hot_predictions(predictions):
        return [p for p in predictions if p.category == 'hot']

    @staticmethod
    def cold_predictions(predictions):
        return [p for p in predictions if p.category == 'cold']

    # ── Wheel neighbour groups ───────────────────────────────────────

    def analyze_ml_neighbors(self, history, predictions=None):
        """Best wheel groups (centre ± 2) built around the top-ranked numbers."""
        if predictions is None:
            predictions = self.analyze_predictions(history)
        if not predictions:
            return []

        by_number = {p.number: p.probability for p in predictions}
        wheel_len = len(WHEEL_ORDER)
        groups = []

        for pred in predictions[:NEIGHBOR_GROUP_CANDIDATES]:
            pos = NUMBER_TO_POSITION[pred.number]
            members = []
            total = pred.probability
            for offset in range(-NEIGHBOURS_PER_SIDE, NEIGHBOURS_PER_SIDE + 1):
                neighbour = WHEEL_ORDER[(pos + offset + wheel_len) % wheel_len]
                members.append(neighbour)
                if offset != 0:
                    total += by_number.get(neighbour, 0.0) * NEIGHBOR_GROUP_WEIGHT

            if total > NEIGHBOR_GROUP_MIN_PROBABILITY:
                groups.append(NeighborGroup(
                    number=pred.number,
                    neighbors=sorted(members),
                    total_probability=total,
                    reasoning=f"Centre: {pred.number} ({pred.probability * 100:.1f}%) + physical neighbours",
                ))

        groups.sort(key=lambda g: g.total_probability, reverse=True)
        return groups[:NEIGHBOR_GROUP_MAX]

    def get_summary(self, history):
        predictions = self.analyze_predictions(history)
        return {
            'total_spins': len(spin_numbers(history)),
            'predictions': [p.to_dict() for p in predictions],
            'top': [p.to_dict() for p in self.top_predictions(predictions)],
            'hot': [p.to_dict() for p in self.hot_predictions(predictions)],
            'cold': [p.to_dict() for p in self.cold_predictions(predictions)],
            'neighbors': [g.to_dict() for g in self.analyze_ml_neighbors(history, predictions)],
        }
