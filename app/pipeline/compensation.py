"""
Batch: COMPENSATION — valid referrals whose trips are complete are due a bonus.
"""
from app.config import SCENARIO_COMPLETED


def is_compensation_due(record) -> bool:
    return record.trip_scenario == SCENARIO_COMPLETED
