"""
Markov Chain Model - Fixed-order transition counts over the full history.
Estimates P(next | last `order` spins) from every (order+1)-spin window seen.
"""

from collections import Counter

import numpy as np

from config import TOTAL_NUMBERS, MARKOV_ORDER
from roulette_engine.history import spin_numbers


class MarkovChain:
    def __init__(self, order=MARKOV_ORDER):
        self.order = order

    def build_states(self, history):
        """Count every contiguous (order+1)-tuple; identical tuples merge."""
        numbers = spin_numbers(history)
        states = Counter()
        for i in range(self.order, len(numbers)):
            states[tuple(numbers[i - self.order:i + 1])] += 1
        return states

    def get_probabilities(self, history):
        """Distribution over the next number given the current context.

        Falls back to uniform when history is shorter than order+1 or the
        current context has never been followed by anything.

        Returns:
            np.array of shape (37,)
        """
        numbers = spin_numbers(history)
        uniform = np.full(TOTAL_NUMBERS, 1.0 / TOTAL_NUMBERS)
        if len(numbers) < self.order + 1:
            return uniform

        context = tuple(numbers[-self.order:])
        counts = np.zeros(TOTAL_NUMBERS)
        for state, occurrences in self.build_states(numbers).items():
            if state[:-1] == context:
                counts[state[-1]] += occurrences

        total = counts.sum()
        if total == 0:
            return uniform
        return counts / total

    def probability(self, target_number, history):
        return float(self.get_probabilities(history)[target_number])

    def get_top_predictions(self, history, top_n=5):
        """Get top predicted numbers with probabilities."""
        probs = self.get_probabilities(history)
        top_indices = np.argsort(-probs, kind='stable')[:top_n]

        return [
            {'number': int(idx), 'probability': round(float(probs[idx]), 4)}
            for idx in top_indices
        ]

    def get_summary(self, history):
        numbers = spin_numbers(history)
        return {
            'total_spins': len(numbers),
            'order': self.order,
            'distinct_states': len(self.build_states(numbers)),
            'top_predictions': self.get_top_predictions(numbers),
        }
