from datetime import datetime

import pytest

from phoneshop.analytics.trade_ins import trade_in_trends
from phoneshop.errors import ValidationError
from phoneshop.models import TradeIn


def _trade(id, ts, offer, accepted):
    return TradeIn(id=id, brand='Apple', model='iPhone 13', condition='Good', offer_amount=offer, accepted=accepted, timestamp=ts)


def test_thirty_day_range_gives_fifteen_two_day_buckets():
    result = trade_in_trends([], datetime(2025, 1, 1), datetime(2025, 1, 31))
    assert result['bucket_days'] == 2
    assert len(result['timeline']) == 15
    assert result['timeline'][0]['date'] == datetime(2025, 1, 1)
    assert result['timeline'][-1]['bucket_end'] == datetime(2025, 1, 31)
    assert all(b['count'] == 0 and b['acceptance_rate'] == 0 and b['total_value'] == 0 for b in result['timeline'])
    assert result['overall_acceptance_rate'] == 0


def test_bucket_metrics_and_half_open_bounds():
    rows = [
        _trade(1, datetime(2025, 1, 1, 9), 300.0, True),
        _trade(2, datetime(2025, 1, 2, 18), 100.0, False),
        # lands exactly on the second bucket's start
        _trade(3, datetime(2025, 1, 3), 200.0, True),
    ]
    result = trade_in_trends(rows, datetime(2025, 1, 1), datetime(2025, 1, 31))
    first, second = result['timeline'][0], result['timeline'][1]
    assert first['count'] == 2
    assert first['accepted_count'] == 1
    assert first['average_offer'] == 200.0
    assert first['acceptance_rate'] == 50.0
    assert first['total_value'] == 300.0
    assert second['count'] == 1
    assert result['total_trade_ins'] == 3
    assert result['total_value'] == 500.0
    assert result['overall_acceptance_rate'] == pytest.approx(200 / 3)


def test_short_range_uses_one_day_minimum():
    result = trade_in_trends([], datetime(2025, 1, 1), datetime(2025, 1, 4))
    assert result['bucket_days'] == 1
    assert len(result['timeline']) == 3


def test_same_start_and_end_still_emits_a_bucket():
    result = trade_in_trends([], datetime(2025, 1, 1), datetime(2025, 1, 1))
    assert len(result['timeline']) == 1


def test_inverted_range_rejected():
    with pytest.raises(ValidationError):
        trade_in_trends([], datetime(2025, 2, 1), datetime(2025, 1, 1))


def test_ragged_range_last_bucket_stops_at_end():
    rows = [
        _trade(1, datetime(2025, 1, 31, 12), 120.0, True),
        _trade(2, datetime(2025, 2, 1), 80.0, True),
        # after the range, inside what a full-width last bucket would cover
        _trade(3, datetime(2025, 2, 2, 12), 300.0, True),
    ]
    result = trade_in_trends(rows, datetime(2025, 1, 1), datetime(2025, 2, 1))
    assert result['bucket_days'] == 3
    assert result['timeline'][-1]['bucket_end'] == datetime(2025, 2, 1)
    assert all(b['bucket_end'] <= datetime(2025, 2, 1) for b in result['timeline'])
    assert result['total_trade_ins'] == 2
    assert result['total_value'] == 200.0
    assert result['timeline'][-1]['count'] == 2
