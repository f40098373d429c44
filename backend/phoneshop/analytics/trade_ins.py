from __future__ import annotations
import math
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List

from phoneshop.errors import ValidationError

DEFAULT_BUCKETS = 15


def _bucket(rows: List[Any], start: datetime, end: datetime) -> Dict[str, Any]:
    accepted = [t for t in rows if t.accepted]
    count = len(rows)
    return {
        'date': start,
        'bucket_end': end,
        'count': count,
        'accepted_count': len(accepted),
        'average_offer': sum(float(t.offer_amount or 0) for t in rows) / count if count else 0,
        'acceptance_rate': len(accepted) / count * 100 if count else 0,
        'total_value': sum(float(t.offer_amount or 0) for t in accepted),
    }


def trade_in_trends(trade_ins: Iterable[Any], start: datetime, end: datetime, buckets: int = DEFAULT_BUCKETS) -> Dict[str, Any]:
    """Split [start, end] into equal-width day buckets and aggregate trade-ins.

    Bucket width is ceil(total days / buckets), at least one day. Each bucket
    counts trade-ins in [bucket start, bucket end); the last bucket is cut at
    ``end`` and also takes trade-ins stamped exactly at ``end``. Empty buckets
    are emitted with zeros so the timeline covers the whole range.
    """
    if end < start:
        raise ValidationError('end must not be before start')
    if buckets < 1:
        raise ValidationError('buckets must be >= 1')
    rows = list(trade_ins)
    total_days = (end - start).total_seconds() / 86400
    width = timedelta(days=max(1, math.ceil(total_days / buckets)))

    timeline = []
    cursor = start
    while True:
        bucket_end = min(cursor + width, end)
        last = bucket_end >= end
        in_bucket = [t for t in rows
                     if cursor <= t.timestamp < bucket_end or (last and t.timestamp == end)]
        timeline.append(_bucket(in_bucket, cursor, bucket_end))
        if last:
            break
        cursor = bucket_end

    total = sum(b['count'] for b in timeline)
    accepted = sum(b['accepted_count'] for b in timeline)
    return {
        'start': start,
        'end': end,
        'bucket_days': width.days,
        'timeline': timeline,
        'total_trade_ins': total,
        'accepted_trade_ins': accepted,
        'overall_acceptance_rate': accepted / total * 100 if total else 0,
        'total_value': sum(b['total_value'] for b in timeline),
    }
