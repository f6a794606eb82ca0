"""
HTTP Routes - Spin ingestion and JSON endpoints for predictions, patterns
and strategies. Every engine call works on a snapshot of the history.
"""

import random

from flask import Blueprint, current_app, jsonify, request

from config import RESULTS_DEFAULT_LIMIT, TOP_PREDICTIONS_COUNT
from roulette_engine.history import InvalidOutcomeError
from roulette_engine.ml.combined_strategy import StrategyAllocator, generate_straight_up_numbers
from roulette_engine.ml.ensemble import PredictionRanker
from roulette_engine.ml.pattern_detector import PatternDetector

main_bp = Blueprint('main', __name__)

ranker = PredictionRanker()
detector = PatternDetector()
allocator = StrategyAllocator(ranker)


class BadRequest(Exception):
    pass


def _history():
    return current_app.extensions['event_history']


def _int_arg(name, default=None, minimum=0):
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise BadRequest(f"'{name}' must be an integer")
    if value < minimum:
        raise BadRequest(f"'{name}' must be >= {minimum}")
    return value


@main_bp.errorhandler(BadRequest)
@main_bp.errorhandler(InvalidOutcomeError)
def handle_bad_request(error):
    print(f"[API] 400 on {request.path}: {error}")
    return jsonify({'error': str(error)}), 400


@main_bp.app_errorhandler(404)
def handle_not_found(error):
    return jsonify({'error': 'Not found'}), 404


@main_bp.route('/health')
def health():
    return jsonify({'status': 'ok', 'service': 'Roulette Strategy Engine',
                    'total_spins': len(_history())})


# ─── Results ──────────────────────────────────────────────────────────

@main_bp.route('/api/results', methods=['POST'])
def add_result():
    data = request.get_json(silent=True)
    if isinstance(data, dict) and isinstance(data.get('numbers'), list):
        records = _history().extend(data['numbers'])
        print(f"[Results] Stored {len(records)} spins, total {len(_history())}")
        return jsonify([r.to_dict() for r in records]), 201
    if not isinstance(data, dict) or 'number' not in data:
        raise BadRequest("Body must be a JSON object with a 'number' or 'numbers' field")

    record = _history().append(data['number'])
    print(f"[Results] Stored spin {record.number} ({record.color}), total {len(_history())}")
    return jsonify(record.to_dict()), 201


@main_bp.route('/api/results', methods=['GET'])
def list_results():
    limit = _int_arg('limit', RESULTS_DEFAULT_LIMIT, minimum=1)
    return jsonify([r.to_dict() for r in _history().snapshot(limit)])


@main_bp.route('/api/results', methods=['DELETE'])
def clear_results():
    count = _history().clear()
    print(f"[RESET] Cleared {count} spins")
    return jsonify({'cleared': count})


# ─── Engine Output ────────────────────────────────────────────────────

@main_bp.route('/api/predictions')
def predictions():
    top = _int_arg('top', TOP_PREDICTIONS_COUNT, minimum=1)
    snapshot = _history().snapshot()
    ranked = ranker.analyze_predictions(snapshot)
    return jsonify({
        'total_spins': len(snapshot),
        'predictions': [p.to_dict() for p in ranked],
        'top': [p.to_dict() for p in ranker.top_predictions(ranked, top)],
        'hot': [p.to_dict() for p in ranker.hot_predictions(ranked)],
        'cold': [p.to_dict() for p in ranker.cold_predictions(ranked)],
    })


@main_bp.route('/api/patterns')
def patterns():
    snapshot = _history().snapshot()
    return jsonify([p.to_dict() for p in detector.analyze_all(snapshot)])


@main_bp.route('/api/strategies')
def strategies():
    snapshot = _history().snapshot()
    strategy = allocator.generate_optimal_strategy(snapshot)
    if strategy is None:
        return jsonify({'status': 'waiting_for_data', 'strategy': None,
                        'total_spins': len(snapshot)})

    print(f"[Strategy] {len(strategy.allocations)} allocations, "
          f"expected return {strategy.expected_return:.3f}")
    return jsonify({'status': 'ready', 'strategy': strategy.to_dict(),
                    'total_spins': len(snapshot)})


@main_bp.route('/api/neighbors')
def neighbors():
    snapshot = _history().snapshot()
    return jsonify([g.to_dict() for g in ranker.analyze_ml_neighbors(snapshot)])


@main_bp.route('/api/straight-up')
def straight_up():
    seed = _int_arg('seed')
    rng = random.Random(seed) if seed is not None else None
    return jsonify({'numbers': generate_straight_up_numbers(_history().snapshot(), rng)})


@main_bp.route('/api/summary')
def summary():
    snapshot = _history().snapshot()
    return jsonify({
        'total_spins': len(snapshot),
        'markov': ranker.markov.get_summary(snapshot),
        'patterns': detector.get_summary(snapshot),
    })
