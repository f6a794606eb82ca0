"""
Configuration constants for the Roulette Pattern & Strategy Engine.
Single source of truth for the wheel layout and every engine threshold.
"""

import os


# ─── European Roulette Wheel Layout ──────────────────────────────────
# Physical wheel order (clockwise from 0)
WHEEL_ORDER = [
    0, 32, 15, 19, 4, 21, 2, 25, 17, 34, 6, 27, 13, 36,
    11, 30, 8, 23, 10, 5, 24, 16, 33, 1, 20, 14, 31, 9,
    22, 18, 29, 7, 28, 12, 35, 3, 26
]

# Number to wheel position mapping
NUMBER_TO_POSITION = {num: idx for idx, num in enumerate(WHEEL_ORDER)}

TOTAL_NUMBERS = 37  # 0-36
NEIGHBOURS_PER_SIDE = 2      # ±2 on the physical wheel

# Number properties
RED_NUMBERS = frozenset({1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36})
BLACK_NUMBERS = frozenset(n for n in range(1, TOTAL_NUMBERS) if n not in RED_NUMBERS)
GREEN_NUMBERS = frozenset({0})

FIRST_DOZEN = frozenset(range(1, 13))
SECOND_DOZEN = frozenset(range(13, 25))
THIRD_DOZEN = frozenset(range(25, 37))
DOZENS = {1: FIRST_DOZEN, 2: SECOND_DOZEN, 3: THIRD_DOZEN}

FIRST_COLUMN = frozenset({1, 4, 7, 10, 13, 16, 19, 22, 25, 28, 31, 34})
SECOND_COLUMN = frozenset({2, 5, 8, 11, 14, 17, 20, 23, 26, 29, 32, 35})
THIRD_COLUMN = frozenset({3, 6, 9, 12, 15, 18, 21, 24, 27, 30, 33, 36})

LOW_NUMBERS = frozenset(range(1, 19))
HIGH_NUMBERS = frozenset(range(19, 37))
ODD_NUMBERS = frozenset(n for n in range(1, 37) if n % 2 == 1)
EVEN_NUMBERS = frozenset(n for n in range(1, 37) if n % 2 == 0)

# ─── Payout Table ─────────────────────────────────────────────────────
PAYOUTS = {
    'straight': 35,      # Single number
    'neighbors': 35,     # Each neighbour is played straight-up
    'dozen': 2,          # 12 numbers
    'red_black': 1,      # 18 numbers
}

# ─── Feature Extraction ──────────────────────────────────────────────
FEATURE_WINDOW = 50                 # Trailing window for per-number features
MOMENTUM_MIN_SPINS = 10             # Momentum is 0 below this window length
NEIGHBOUR_ACTIVITY_WINDOW = 10      # Last N spins checked for wheel neighbours
SEQUENCE_BLOCK_SIZE = 5             # Block length for repeat detection
SEQUENCE_PATTERN_STEP = 0.1         # Score added per repeated block
SEQUENCE_PATTERN_CAP = 1.0

# ─── Markov Chain ─────────────────────────────────────────────────────
MARKOV_ORDER = 3                    # Context length; states are order+1 tuples

# ─── Bayesian Update ─────────────────────────────────────────────────
# Simplified update: evidence is a fixed approximation of the uniform rate,
# so posteriors can exceed 1 and are clamped by the ensemble.
BAYES_PRIOR = 1.0 / TOTAL_NUMBERS
BAYES_EVIDENCE = 0.027
BAYES_HIGH_FREQUENCY = 0.027
BAYES_LOW_FREQUENCY = 0.020
BAYES_HIGH_FREQUENCY_FACTOR = 1.2
BAYES_LOW_FREQUENCY_FACTOR = 0.8
BAYES_MOMENTUM_THRESHOLD = 0.5
BAYES_RISING_MOMENTUM_FACTOR = 1.15
BAYES_FALLING_MOMENTUM_FACTOR = 0.85
BAYES_NEIGHBOUR_THRESHOLD = 0.3
BAYES_NEIGHBOUR_FACTOR = 1.1

# ─── Ensemble Weights ────────────────────────────────────────────────
ENSEMBLE_MARKOV_WEIGHT = 0.4
ENSEMBLE_BAYESIAN_WEIGHT = 0.3
ENSEMBLE_FREQUENCY_WEIGHT = 0.2
ENSEMBLE_MOMENTUM_WEIGHT = 0.1

# ─── Classification & Reasoning ──────────────────────────────────────
HOT_PROBABILITY_THRESHOLD = 0.035
HOT_FREQUENCY_THRESHOLD = 0.03
COLD_PROBABILITY_THRESHOLD = 0.020
COLD_LAST_SEEN_THRESHOLD = 30

REASON_FREQUENCY_THRESHOLD = 0.03
REASON_LAST_SEEN_THRESHOLD = 25
REASON_MOMENTUM_THRESHOLD = 0.3
REASON_NEIGHBOUR_THRESHOLD = 0.3
REASON_MARKOV_THRESHOLD = 0.04

# ─── Prediction Ranking ──────────────────────────────────────────────
MIN_PREDICTION_SPINS = 20           # Below this the whole pipeline returns []
TOP_PREDICTIONS_COUNT = 5

# ML neighbour groups (centre ± 2 on the wheel)
NEIGHBOR_GROUP_CANDIDATES = 10      # Top ranked numbers considered as centres
NEIGHBOR_GROUP_WEIGHT = 0.3         # Weight of each neighbour's probability
NEIGHBOR_GROUP_MIN_PROBABILITY = 0.08
NEIGHBOR_GROUP_MAX = 3

# ─── Pattern Detection ────────────────────────────────────────────────
COLOR_SEQUENCE_MIN_SPINS = 4        # 3 considered + 1 for context
COLOR_SEQUENCE_LENGTH = 3
COLOR_SEQUENCE_PROBABILITY = 0.78
COLOR_SEQUENCE_CONFIDENCE = 0.85

DOZEN_WINDOW = 10
DOZEN_MIN_COUNT = 4                 # 40% of the window
DOZEN_BOOST = 1.5
DOZEN_MAX_PROBABILITY = 0.85
DOZEN_CONFIDENCE = 0.80

HOT_NUMBER_WINDOW = 20
HOT_NUMBER_THRESHOLD = 1.5          # Times above expected frequency
HOT_NUMBER_MIN_COUNT = 3
HOT_NUMBER_BOOST = 3
HOT_NUMBER_MAX_PROBABILITY = 0.75
HOT_NUMBER_CONFIDENCE = 0.70

PARITY_WINDOW = 8
PARITY_MIN_NON_ZERO = 6
PARITY_MIN_COUNT = 5
PARITY_PROBABILITY = 0.72
PARITY_CONFIDENCE = 0.75

# ─── Combined Strategy (balanced portfolio) ──────────────────────────
MIN_STRATEGY_SPINS = 25
STRAIGHT_UP_PERCENTAGE = 50
NEIGHBORS_PERCENTAGE = 25
DOZENS_PERCENTAGE = 15
COLORS_PERCENTAGE = 10
STRATEGY_HOT_COUNT = 5              # Hot numbers played straight-up
STRATEGY_COLD_COUNT = 2             # Cold numbers whose neighbours are played
STRATEGY_DOZEN_WINDOW = 15
STRATEGY_COLOR_WINDOW = 10
STRATEGY_RISK_LEVEL = 'medium'      # Only generator defined; never varies
STRATEGY_DEFAULT_CONFIDENCE = 0.5

# ─── Straight-Up Number Generator ────────────────────────────────────
STRAIGHT_UP_DEFAULT_NUMBERS = [7, 17, 23, 32, 1, 14, 29]
STRAIGHT_UP_MIN_SPINS = 10
STRAIGHT_UP_COUNT = 7
STRAIGHT_UP_HOT_WINDOW = 30
STRAIGHT_UP_HOT_COUNT = 3
STRAIGHT_UP_COLD_WINDOW = 15
STRAIGHT_UP_COLD_COUNT = 2

# ─── Server Settings ─────────────────────────────────────────────────
HOST = os.environ.get('ROULETTE_HOST', '0.0.0.0')
PORT = int(os.environ.get('ROULETTE_PORT', '5050'))
DEBUG = os.environ.get('ROULETTE_DEBUG', '').lower() in ('1', 'true', 'yes')
SECRET_KEY = os.environ.get('ROULETTE_SECRET_KEY', 'roulette-strategy-engine')
HISTORY_LIMIT = 5000                # Max events kept by the in-memory store
RESULTS_DEFAULT_LIMIT = 50


# ─── Number Property Helpers ─────────────────────────────────────────
def get_number_color(number):
    if number in RED_NUMBERS:
        return 'red'
    elif number == 0:
        return 'green'
    return 'black'


def get_dozen(number):
    if number == 0:
        return None
    return (number - 1) // 12 + 1


def get_column(number):
    if number == 0:
        return None
    return (number - 1) % 3 + 1


def get_half(number):
    if number == 0:
        return None
    return 'low' if number <= 18 else 'high'


def get_parity(number):
    if number == 0:
        return None
    return 'even' if number % 2 == 0 else 'odd'


def get_wheel_neighbours(number, per_side=NEIGHBOURS_PER_SIDE):
    """Numbers adjacent on the physical wheel, nearest-left first, centre excluded."""
    pos = NUMBER_TO_POSITION.get(number)
    if pos is None:
        return []
    wheel_len = len(WHEEL_ORDER)
    return [
        WHEEL_ORDER[(pos + offset) % wheel_len]
        for offset in range(-per_side, per_side + 1)
        if offset != 0
    ]
