"""
Intake step 1: ELIGIBILITY — cross-check scout and candidate.

The scout must hold a known referral code; the candidate must appear in the
churned-driver list under the submitted phone or email.
"""
import logging
from dataclasses import replace
from typing import Any, Optional, Sequence

from app.config import ELIGIBLE, NOT_ELIGIBLE, INVALID_CANDIDATE_EMAIL
from app.pipeline.anonymize import hash_phone
from app.pipeline.base import ReferralRecord

logger = logging.getLogger('pipeline.eligibility')


def find_scout(scouts: Sequence[Any], code) -> Optional[Any]:
    """First scout whose code equals code exactly."""
    if code in (None, ''):
        return None
    return next((s for s in scouts if s.code == code), None)


def find_churned_candidate(candidates: Sequence[Any], phone, email) -> Optional[Any]:
    """
    First churned driver (stored order) matching phone OR email.

    Blank submitted values never match, otherwise a blank email on the form
    would match every churned row with no email on file.
    """
    for candidate in candidates:
        if phone not in (None, '') and candidate.phone == phone:
            return candidate
        if email not in (None, '') and candidate.email == email:
            return candidate
    return None


def validate_eligibility(
    record: ReferralRecord,
    scouts: Sequence[Any],
    churned: Sequence[Any],
    invalid_candidate_email: str = INVALID_CANDIDATE_EMAIL,
) -> ReferralRecord:
    """Return record annotated with scout/candidate eligibility and lookups."""
    scout = find_scout(scouts, record.scout_code)
    if scout is not None:
        record = replace(
            record,
            scout_eligibility=ELIGIBLE,
            scout_email=scout.email or '',
            scout_id=scout.scout_id or '',
            scout_name=scout.name or '',
        )
    else:
        record = replace(
            record,
            scout_eligibility=NOT_ELIGIBLE,
            scout_email='',
            scout_id='',
            scout_name='',
        )

    candidate = find_churned_candidate(churned, record.candidate_phone, record.candidate_email)
    if candidate is not None:
        record = replace(
            record,
            candidate_eligibility=ELIGIBLE,
            candidate_id=candidate.candidate_id or '',
            resolved_candidate_email=candidate.email or '',
        )
    else:
        record = replace(
            record,
            candidate_eligibility=NOT_ELIGIBLE,
            candidate_id='',
            resolved_candidate_email=invalid_candidate_email,
        )

    logger.info(
        "Referral %s: scout=%s candidate=%s (%s)",
        record.row_id, record.scout_eligibility, record.candidate_eligibility,
        hash_phone(record.candidate_phone),
    )
    return record
