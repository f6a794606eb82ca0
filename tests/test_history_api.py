"""
Event history and HTTP API tests.

Tests cover:
  1. Outcome records — derived table properties and input validation
  2. EventHistory — ordering, snapshots, limits and reset
  3. API — ingestion, engine endpoints and error responses
"""

import json
from dataclasses import FrozenInstanceError

import pytest

from roulette_engine import create_app
from roulette_engine.history import (
    EventHistory, InvalidOutcomeError, OutcomeRecord, make_outcome, spin_numbers,
)

SAMPLE_SPINS = [
    17, 25, 2, 21, 4, 19, 15, 3, 26, 0,
    32, 14, 35, 22, 9, 18, 29, 7, 28, 12,
    8, 30, 11, 36, 13, 27, 6, 34, 10, 33,
]


@pytest.fixture
def history():
    return EventHistory()


@pytest.fixture
def client(history):
    app = create_app(history)
    app.config['TESTING'] = True
    return app.test_client()


def _post_spins(client, numbers):
    for n in numbers:
        resp = client.post('/api/results', json={'number': n})
        assert resp.status_code == 201


# ═══════════════════════════════════════════════════════════════════════
#  1. OUTCOME RECORDS
# ═══════════════════════════════════════════════════════════════════════

class TestOutcomeRecord:
    def test_zero(self):
        rec = make_outcome(0, timestamp=1.0)
        assert rec.color == 'green'
        assert rec.dozen is None
        assert rec.column is None
        assert rec.half is None
        assert rec.parity is None

    def test_seventeen(self):
        rec = make_outcome(17, timestamp=1.0)
        assert (rec.color, rec.dozen, rec.column, rec.half, rec.parity) == \
            ('black', 2, 2, 'low', 'odd')

    def test_thirty_six(self):
        rec = make_outcome(36, timestamp=1.0)
        assert (rec.color, rec.dozen, rec.column, rec.half, rec.parity) == \
            ('red', 3, 3, 'high', 'even')

    @pytest.mark.parametrize('bad', [37, -1, '5', 5.0, True, None])
    def test_invalid_inputs_rejected(self, bad):
        with pytest.raises(InvalidOutcomeError):
            make_outcome(bad)

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            make_outcome(99)

    def test_to_dict_is_json_ready(self):
        d = json.loads(json.dumps(make_outcome(5, timestamp=2.5).to_dict()))
        assert d == {'number': 5, 'color': 'red', 'dozen': 1, 'column': 2,
                     'half': 'low', 'parity': 'odd', 'timestamp': 2.5}

    def test_records_are_immutable(self):
        rec = make_outcome(5)
        with pytest.raises(FrozenInstanceError):
            rec.number = 6


# ═══════════════════════════════════════════════════════════════════════
#  2. EVENT HISTORY
# ═══════════════════════════════════════════════════════════════════════

class TestEventHistory:
    def test_append_keeps_order(self, history):
        history.extend([1, 2, 3])
        assert history.numbers() == [1, 2, 3]
        assert len(history) == 3

    def test_snapshot_is_tuple_of_records(self, history):
        history.extend([1, 2])
        snap = history.snapshot()
        assert isinstance(snap, tuple)
        assert all(isinstance(r, OutcomeRecord) for r in snap)

    def test_snapshot_unaffected_by_later_appends(self, history):
        history.extend([1, 2])
        snap = history.snapshot()
        history.append(3)
        assert len(snap) == 2

    def test_snapshot_limit_returns_most_recent(self, history):
        history.extend([1, 2, 3, 4])
        assert spin_numbers(history.snapshot(2)) == [3, 4]

    def test_invalid_spin_not_stored(self, history):
        with pytest.raises(InvalidOutcomeError):
            history.append(40)
        assert len(history) == 0

    def test_max_size_drops_oldest(self):
        small = EventHistory(max_size=3)
        small.extend([1, 2, 3, 4, 5])
        assert small.numbers() == [3, 4, 5]

    def test_timestamps_non_decreasing(self, history):
        history.extend(SAMPLE_SPINS)
        stamps = [r.timestamp for r in history.snapshot()]
        assert stamps == sorted(stamps)

    def test_earlier_explicit_timestamp_is_clamped(self, history):
        history.append(5, timestamp=100.0)
        history.append(6, timestamp=50.0)
        assert [r.timestamp for r in history.snapshot()] == [100.0, 100.0]

    def test_extend_is_all_or_nothing(self, history):
        history.append(1)
        with pytest.raises(InvalidOutcomeError):
            history.extend([2, 3, 40, 4])
        assert history.numbers() == [1]

    def test_extend_accepts_generators(self, history):
        records = history.extend(n for n in (7, 8))
        assert [r.number for r in records] == [7, 8]

    def test_clear_returns_count(self, history):
        history.extend([1, 2, 3])
        assert history.clear() == 3
        assert len(history) == 0
        assert history.snapshot() == ()

    def test_spin_numbers_accepts_ints_and_records(self):
        assert spin_numbers([make_outcome(4), 7]) == [4, 7]


# ═══════════════════════════════════════════════════════════════════════
#  3. API
# ═══════════════════════════════════════════════════════════════════════

class TestResultsAPI:
    def test_health(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'ok'

    def test_post_valid_spin(self, client, history):
        resp = client.post('/api/results', json={'number': 17})
        assert resp.status_code == 201
        body = resp.get_json()
        assert body['number'] == 17
        assert body['color'] == 'black'
        assert history.numbers() == [17]

    @pytest.mark.parametrize('payload', [
        {'number': 37}, {'number': -1}, {'number': '5'}, {'number': 5.5}, {'value': 3},
    ])
    def test_post_invalid_spin(self, client, history, payload):
        resp = client.post('/api/results', json=payload)
        assert resp.status_code == 400
        assert 'error' in resp.get_json()
        assert len(history) == 0

    def test_post_batch(self, client, history):
        resp = client.post('/api/results', json={'numbers': [1, 2, 3]})
        assert resp.status_code == 201
        assert [r['number'] for r in resp.get_json()] == [1, 2, 3]
        assert history.numbers() == [1, 2, 3]

    def test_post_batch_with_invalid_spin_stores_nothing(self, client, history):
        resp = client.post('/api/results', json={'numbers': [1, 99]})
        assert resp.status_code == 400
        assert len(history) == 0

    def test_post_non_json(self, client):
        resp = client.post('/api/results', data='17', content_type='text/plain')
        assert resp.status_code == 400

    def test_get_results_limit(self, client):
        _post_spins(client, [1, 2, 3])
        body = client.get('/api/results?limit=2').get_json()
        assert [r['number'] for r in body] == [2, 3]

    def test_bad_limit(self, client):
        assert client.get('/api/results?limit=abc').status_code == 400
        assert client.get('/api/results?limit=0').status_code == 400

    def test_delete_clears(self, client, history):
        _post_spins(client, [1, 2])
        resp = client.delete('/api/results')
        assert resp.get_json() == {'cleared': 2}
        assert len(history) == 0

    def test_unknown_route_is_json_404(self, client):
        resp = client.get('/api/nothing-here')
        assert resp.status_code == 404
        assert resp.get_json() == {'error': 'Not found'}

    def test_json_responses_not_cached(self, client):
        resp = client.get('/health')
        assert 'no-store' in resp.headers['Cache-Control']


class TestEngineAPI:
    def test_predictions_empty_below_minimum(self, client, history):
        history.extend(SAMPLE_SPINS[:19])
        body = client.get('/api/predictions').get_json()
        assert body['total_spins'] == 19
        assert body['predictions'] == []
        assert body['top'] == []

    def test_predictions_ready(self, client, history):
        history.extend(SAMPLE_SPINS)
        body = client.get('/api/predictions?top=3').get_json()
        assert len(body['predictions']) == 37
        assert len(body['top']) == 3
        probs = [p['probability'] for p in body['predictions']]
        assert probs == sorted(probs, reverse=True)

    def test_patterns_color_run(self, client, history):
        history.extend([1, 3, 5, 7])
        body = client.get('/api/patterns').get_json()
        assert [p['type'] for p in body] == ['color_sequence']
        assert body[0]['targetOutcome'] == 'black'

    def test_strategies_waiting_then_ready(self, client, history):
        history.extend(SAMPLE_SPINS[:24])
        body = client.get('/api/strategies').get_json()
        assert body['status'] == 'waiting_for_data'
        assert body['strategy'] is None

        history.append(SAMPLE_SPINS[24])
        body = client.get('/api/strategies').get_json()
        assert body['status'] == 'ready'
        assert body['total_spins'] == 25
        assert body['strategy']['riskLevel'] == 'medium'
        assert body['strategy']['allocations']

    def test_neighbors(self, client, history):
        history.extend(SAMPLE_SPINS)
        body = client.get('/api/neighbors').get_json()
        assert 1 <= len(body) <= 3
        for group in body:
            assert len(group['neighbors']) == 5
            assert group['number'] in group['neighbors']

    def test_straight_up_seeded(self, client, history):
        history.extend(SAMPLE_SPINS)
        first = client.get('/api/straight-up?seed=7').get_json()['numbers']
        second = client.get('/api/straight-up?seed=7').get_json()['numbers']
        assert first == second
        assert len(first) == 7
        assert 0 not in first

    def test_straight_up_defaults_with_little_data(self, client):
        body = client.get('/api/straight-up').get_json()
        assert body['numbers'] == [7, 17, 23, 32, 1, 14, 29]

    def test_summary(self, client, history):
        history.extend(SAMPLE_SPINS)
        body = client.get('/api/summary').get_json()
        assert body['total_spins'] == 30
        assert body['markov']['order'] == 3
        assert len(body['markov']['top_predictions']) == 5
        assert sum(body['patterns']['colors'].values()) == 20
