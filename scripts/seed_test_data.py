#!/usr/bin/env python3
"""
Seed reference data for trying the referral flow locally.

Creates scouts, churned drivers, an activity feed and a few referrals in
each lifecycle state:
  1. Valid referral with no trips yet
  2. Valid referral marked Completed (picked up by the compensation sweep)
  3. Escalated not-eligible referral (picked up by process_escalations)
  4. Blocked driver with an escalation note

Usage:
    python scripts/seed_test_data.py          # seed all scenarios
    python scripts/seed_test_data.py --clear  # wipe seeded data first

Requires: DATABASE_URL set (or defaults to sqlite:///local.db).
"""
import sys
import os
import argparse
from datetime import date, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.config import (
    ELIGIBLE, ESCALATED, NOT_ELIGIBLE, SCENARIO_COMPLETED, SCENARIO_NO_TRIPS,
)
from app.database import get_session, engine, Base
from app.models.candidate import BlockedCandidate, ChurnedCandidate, DriverActivity
from app.models.referral import NotEligibleReferral, Referral, ValidReferral
from app.models.scout import Scout


# ── Fake people ──────────────────────────────────────────────────────────────

# Prefix for seeded scout codes and candidate ids so we can clear them
SEED_PREFIX = 'seed-'

SCOUTS = [
    {'code': 'seed-AM01', 'scout_id': 'seed-S1', 'name': 'Amina Otieno',  'email': 'amina@example.com'},
    {'code': 'seed-BK02', 'scout_id': 'seed-S2', 'name': 'Brian Kimani',  'email': 'brian@example.com'},
    {'code': 'seed-WN03', 'scout_id': 'seed-S3', 'name': 'Wanjiru Njeri', 'email': 'wanjiru@example.com'},
]

CHURNED = [
    {'candidate_id': 'seed-C1', 'phone': '0712345678', 'email': 'jane.driver@example.com'},
    {'candidate_id': 'seed-C2', 'phone': '0799000111', 'email': 'paul.driver@example.com'},
    {'candidate_id': 'seed-C3', 'phone': '0722555444', 'email': 'grace.driver@example.com'},
    {'candidate_id': 'seed-C4', 'phone': '0733222111', 'email': 'otieno.driver@example.com'},
]


def _referral_values(scout, candidate, rank=1):
    return dict(
        scout_code=scout['code'],
        candidate_phone=candidate['phone'],
        candidate_email=candidate['email'],
        scout_name=scout['name'],
        scout_email=scout['email'],
        scout_eligibility=ELIGIBLE,
        candidate_eligibility=ELIGIBLE,
        scout_id=scout['scout_id'],
        candidate_id=candidate['candidate_id'],
        resolved_candidate_email=candidate['email'],
        duplicate_rank=rank,
    )


# ── Scenarios ────────────────────────────────────────────────────────────────

def seed_reference_tables(session):
    session.add_all(Scout(**s) for s in SCOUTS)
    session.add_all(ChurnedCandidate(**c) for c in CHURNED)
    print(f'  Reference: {len(SCOUTS)} scouts, {len(CHURNED)} churned drivers')


def seed_valid_referrals(session):
    """Scenarios 1 and 2: one fresh valid referral, one already completed."""
    fresh = _referral_values(SCOUTS[0], CHURNED[0])
    done = _referral_values(SCOUTS[1], CHURNED[1])
    for values in (fresh, done):
        session.add(Referral(**values))

    session.add(ValidReferral(trip_scenario=SCENARIO_NO_TRIPS, **fresh))
    session.add(ValidReferral(
        trip_scenario=SCENARIO_COMPLETED,
        reactivation_date=date.today() - timedelta(days=20),
        last_activity_date=date.today() - timedelta(days=2),
        **done,
    ))
    session.add_all([
        DriverActivity(candidate_id=CHURNED[0]['candidate_id'], activity_date=date.today() - timedelta(days=1)),
        DriverActivity(candidate_id=CHURNED[1]['candidate_id'], activity_date=date.today() - timedelta(days=2)),
    ])
    print('  [1] Valid referral, no trips yet')
    print('  [2] Valid referral, completed')


def seed_escalation(session):
    """Scenario 3: scout code typo, escalated for manual review."""
    values = _referral_values(SCOUTS[2], CHURNED[2])
    values.update(scout_code=SCOUTS[2]['code'], scout_eligibility=NOT_ELIGIBLE, scout_name='', scout_email='', scout_id='')
    session.add(Referral(**values))
    session.add(NotEligibleReferral(
        escalation_status=ESCALATED,
        resolution_note='Scout typed the code with a space',
        resolution_count=0,
        **values,
    ))
    print('  [3] Escalated not-eligible referral')


def seed_blocked(session):
    """Scenario 4: blocked driver with a leftover escalation note."""
    c = CHURNED[3]
    session.add(BlockedCandidate(
        candidate_id=c['candidate_id'], phone=c['phone'],
        reason='Fraudulent trips', escalation='Scout asked for review',
    ))
    print('  [4] Blocked driver with escalation note')


def clear_seeded_data(session):
    """Remove every row created by this script."""
    deleted = 0
    deleted += session.query(Scout).filter(Scout.code.like(f'{SEED_PREFIX}%')).delete(synchronize_session=False)
    for model in (ChurnedCandidate, DriverActivity, BlockedCandidate):
        deleted += session.query(model).filter(
            model.candidate_id.like(f'{SEED_PREFIX}%')
        ).delete(synchronize_session=False)
    for model in (Referral, ValidReferral, NotEligibleReferral):
        deleted += session.query(model).filter(
            model.scout_code.like(f'{SEED_PREFIX}%')
        ).delete(synchronize_session=False)
    session.commit()
    print(f'Cleared {deleted} seeded rows.')


def main():
    parser = argparse.ArgumentParser(description='Seed reference data for local referral testing')
    parser.add_argument('--clear', action='store_true', help='Clear seeded data before (or instead of) seeding')
    parser.add_argument('--clear-only', action='store_true', help='Only clear, do not re-seed')
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        # Ensure tables exist (for SQLite local dev)
        Base.metadata.create_all(engine)

        session = get_session()
        try:
            if args.clear or args.clear_only:
                clear_seeded_data(session)
                if args.clear_only:
                    return

            print('Seeding test data...')
            seed_reference_tables(session)
            seed_valid_referrals(session)
            seed_escalation(session)
            seed_blocked(session)
            session.commit()
            print('\nDone! POST /api/jobs/<job> to run a job against it.')

        except Exception as e:
            session.rollback()
            print(f'Error: {e}')
            raise
        finally:
            session.close()


if __name__ == '__main__':
    main()
