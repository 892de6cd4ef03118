"""
Batch: ESCALATION — re-admit manually escalated not-eligible referrals.

Operations staff mark a row "Escalated" and write a note. The job copies a
minimal record into Valid Referrals and stamps the source row "Resolved";
the source row stays as the audit trail.
"""
from typing import Any, Dict

from app.config import ELIGIBLE, ESCALATED


def is_ready_for_readmission(row: Any) -> bool:
    """True when every manual re-admission condition holds for row."""
    return (
        row.candidate_eligibility == ELIGIBLE
        and row.escalation_status == ESCALATED
        and bool(row.resolution_note)
        and not row.resolution
        and row.resolution_count == 0
    )


def build_readmitted_values(row: Any, scout: Any) -> Dict[str, Any]:
    """Valid Referrals values for an escalated row and its scout."""
    return {
        'candidate_phone': row.candidate_phone,
        'candidate_email': row.candidate_email,
        'scout_email': scout.email,
        'scout_name': scout.name,
        'scout_id': scout.scout_id,
        'scout_code': row.scout_code,
    }
