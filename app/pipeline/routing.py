"""
Intake step 4: ROUTING — pick the collection a new referral is filed in.

Only the canonical referral (both sides eligible, first of its phone) is
valid. Eligible duplicates are filed as not eligible even though they get a
duplicate notice.
"""
from app.config import ProgramConfig
from app.pipeline.base import ReferralRecord
from app.pipeline.duplicates import both_eligible


def is_valid_referral(record: ReferralRecord) -> bool:
    return both_eligible(record) and record.duplicate_rank == 1


def choose_destination(record: ReferralRecord, program: ProgramConfig) -> str:
    if is_valid_referral(record):
        return program.valid_referrals
    return program.not_eligible_referrals
