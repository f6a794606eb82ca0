"""
Bayesian Estimator — Uniform prior scaled by feature-driven likelihoods.

This is a simplified, un-normalized update: the evidence term is the fixed
constant BAYES_EVIDENCE rather than a sum over all numbers, so a posterior can
exceed 1. The ensemble clamps it.
"""

from config import (
    BAYES_PRIOR, BAYES_EVIDENCE,
    BAYES_HIGH_FREQUENCY, BAYES_LOW_FREQUENCY,
    BAYES_HIGH_FREQUENCY_FACTOR, BAYES_LOW_FREQUENCY_FACTOR,
    BAYES_MOMENTUM_THRESHOLD,
    BAYES_RISING_MOMENTUM_FACTOR, BAYES_FALLING_MOMENTUM_FACTOR,
    BAYES_NEIGHBOUR_THRESHOLD, BAYES_NEIGHBOUR_FACTOR,
)


class BayesianEstimator:

    def likelihood(self, features):
        likelihood = 1.0

        if features.frequency > BAYES_HIGH_FREQUENCY:
            likelihood *= BAYES_HIGH_FREQUENCY_FACTOR
        elif features.frequency < BAYES_LOW_FREQUENCY:
            likelihood *= BAYES_LOW_FREQUENCY_FACTOR

        if features.momentum > BAYES_MOMENTUM_THRESHOLD:
            likelihood *= BAYES_RISING_MOMENTUM_FACTOR
        elif features.momentum < -BAYES_MOMENTUM_THRESHOLD:
            likelihood *= BAYES_FALLING_MOMENTUM_FACTOR

        if features.neighbor_activity > BAYES_NEIGHBOUR_THRESHOLD:
            likelihood *= BAYES_NEIGHBOUR_FACTOR

        return likelihood

    def probability(self, features, history=None):
        """Posterior for one number. `history` is accepted but unused."""
        return (self.likelihood(features) * BAYES_PRIOR) / BAYES_EVIDENCE
