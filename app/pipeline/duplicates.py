"""
Intake step 2: DUPLICATES — rank this referral among eligible referrals of
the same candidate phone.

Rank 1 is the first eligible referral for that phone, 2+ are duplicates,
0 means the rank does not apply (either side not eligible). Phone is the
only dedup key; email is deliberately ignored here.
"""
import logging
from dataclasses import replace
from typing import Iterable

from app.config import ELIGIBLE
from app.pipeline.anonymize import hash_phone
from app.pipeline.base import ReferralRecord

logger = logging.getLogger('pipeline.duplicates')


def phones_match(a, b) -> bool:
    """
    Loose phone equality.

    Older rows may carry phones as numbers, newer ones as text. A number
    matches a text phone with the same numeric value (712345678 matches
    '0712345678'); two text phones must match exactly.
    """
    if a == b:
        return True
    if a in (None, '') or b in (None, ''):
        return False
    if isinstance(a, (int, float)) or isinstance(b, (int, float)):
        try:
            return float(str(a).strip()) == float(str(b).strip())
        except ValueError:
            return False
    return str(a).strip() == str(b).strip()


def both_eligible(record) -> bool:
    return record.scout_eligibility == ELIGIBLE and record.candidate_eligibility == ELIGIBLE


def rank_duplicate(record: ReferralRecord, prior: Iterable) -> ReferralRecord:
    """
    Return record with duplicate_rank set.

    prior must hold only the records submitted before this one.
    """
    if not both_eligible(record):
        return replace(record, duplicate_rank=0)

    count = sum(
        1 for other in prior
        if phones_match(other.candidate_phone, record.candidate_phone) and both_eligible(other)
    )
    rank = count + 1
    if rank > 1:
        logger.info("Referral %s is duplicate #%d for %s", record.row_id, rank, hash_phone(record.candidate_phone))
    return replace(record, duplicate_rank=rank)
