"""
Batch: ACTIVITY — merge the driver activity feed into valid referrals.

The first activity seen for a candidate becomes its reactivation date; later
activity only moves the last-activity date. Reactivation is never
overwritten.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Tuple


def build_activity_map(feed: Iterable[Any]) -> Dict[str, date]:
    """candidate_id → activity date. A later feed row for the same id wins."""
    activity = {}
    for entry in feed:
        if entry.candidate_id:
            activity[str(entry.candidate_id)] = entry.activity_date
    return activity


def plan_activity_updates(records: Iterable[Any], activity: Dict[str, date]) -> List[Tuple[int, str, date]]:
    """
    (row_id, field, value) writes that bring records in line with the feed.

    A second run over an unchanged feed plans nothing: a date equal to the
    reactivation date is not new activity, and an unchanged last-activity
    date is not rewritten.
    """
    updates = []
    for record in records:
        key = str(record.candidate_id) if record.candidate_id else ''
        if key not in activity:
            continue
        seen = activity[key]
        if seen is None:
            continue
        if not record.reactivation_date:
            updates.append((record.row_id, 'reactivation_date', seen))
        elif seen != record.reactivation_date and seen != record.last_activity_date:
            updates.append((record.row_id, 'last_activity_date', seen))
    return updates
