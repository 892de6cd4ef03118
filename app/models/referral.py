"""
Referral models — one table per lifecycle collection.

Referrals is the append-only intake log. Valid Referrals, Not Eligible
Referrals and Compensation Due hold the routed copy; a routed record lives in
exactly one of them at a time.
"""
from sqlalchemy import Column, Integer, Text, Date, DateTime
from sqlalchemy.sql import func

from app.database import Base


class ReferralColumns:
    """Columns shared by every referral collection."""
    id = Column(Integer, primary_key=True, autoincrement=True)
    submitted_at = Column(DateTime(timezone=True), server_default=func.now())
    scout_code = Column(Text, default='')
    candidate_phone = Column(Text, default='')
    candidate_email = Column(Text, default='')
    scout_name = Column(Text, default='')
    scout_email = Column(Text, default='')
    scout_eligibility = Column(Text, default='')      # Eligible / Not Eligible
    candidate_eligibility = Column(Text, default='')  # Eligible / Not Eligible
    scout_id = Column(Text, default='')
    candidate_id = Column(Text, default='')
    resolved_candidate_email = Column(Text, default='')
    duplicate_rank = Column(Integer, default=0)
    trip_scenario = Column(Text, default='')          # No Trips / In progress / Missed / Completed
    reactivation_date = Column(Date, nullable=True)
    last_activity_date = Column(Date, nullable=True)


class Referral(ReferralColumns, Base):
    __tablename__ = 'referrals'


class ValidReferral(ReferralColumns, Base):
    __tablename__ = 'valid_referrals'


class NotEligibleReferral(ReferralColumns, Base):
    __tablename__ = 'not_eligible_referrals'

    # Filled in by operations staff
    escalation_status = Column(Text, default='')      # "Escalated" to request re-admission
    resolution_note = Column(Text, default='')
    resolution_count = Column(Integer, default=0)
    # Empty until the escalation job re-admits the row, then "Resolved"
    resolution = Column(Text, default='')


class CompensationDue(ReferralColumns, Base):
    __tablename__ = 'compensation_due'
