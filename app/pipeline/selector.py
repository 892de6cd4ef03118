"""
Intake step 3 + scenario sweep: NOTIFICATIONS — decide which mails go out.

Both functions are pure: they return a NotificationEvent (or None) and the
manager hands its messages to the notifier.

Intake outcome table:
    scout         candidate      rank   event
    Eligible      Eligible       >= 2   duplicate_notice
    Eligible      Not Eligible   any    ineligible_notice
    Eligible      Eligible       1      confirmation_notice
    Not Eligible  any            any    (none)
"""
from typing import Optional

from app.config import (
    ELIGIBLE, NOT_ELIGIBLE,
    SCENARIO_NO_TRIPS, SCENARIO_IN_PROGRESS, SCENARIO_MISSED, SCENARIO_COMPLETED,
)
from app.pipeline.anonymize import hash_phone
from app.pipeline.base import Message, NotificationEvent, ReferralRecord


DUPLICATE_NOTICE = 'duplicate_notice'
INELIGIBLE_NOTICE = 'ineligible_notice'
CONFIRMATION_NOTICE = 'confirmation_notice'
SCENARIO_NOTICE = 'scenario_notice'

# ── Intake templates: (scout subject, scout body, candidate subject, candidate body)

_INTAKE_TEMPLATES = {
    CONFIRMATION_NOTICE: (
        "Reactivation Program - Confirmation 🎉",
        "Hello, your referral has been successfully processed!",
        "Reactivation Program - Confirmation 🎉",
        "Hello, you have been successfully referred to drive under our program!",
    ),
    INELIGIBLE_NOTICE: (
        "Reactivation Program - Non-Confirmation 😔",
        "Hello, the referral you submitted is not eligible.",
        "Reactivation Program - Not Eligible 😔",
        "Hello, your account was referred, but we couldn't find a match.",
    ),
    DUPLICATE_NOTICE: (
        "Reactivation Program - Not Eligible 😔",
        "Hello, the driver you referred has already been submitted by another agent.",
        "Reactivation Program - Not Eligible 😔",
        "Hello, you have been referred by another agent. Kindly complete your trips to win big!",
    ),
}

# ── Scenario templates (scout only) ──────────────────────────────────────────

SCENARIO_SUBJECT = "Update on your Referral with phone number: {phone}."

SCENARIO_BODIES = {
    SCENARIO_NO_TRIPS:    "Hello {name}, The partner you referred has not completed a ride.",
    SCENARIO_IN_PROGRESS: "Hello {name}, The partner you referred is progressing well!",
    SCENARIO_MISSED:      "Hello {name}, The referral will not be compensated as they didn't meet the trip requirements.",
    SCENARIO_COMPLETED:   "Hello {name}, The partner you referred has completed the requirements! The bonus will be credited.",
}


def intake_event_name(record: ReferralRecord) -> Optional[str]:
    """Event name for an intake outcome, or None when nothing is sent."""
    if record.scout_eligibility != ELIGIBLE:
        return None
    if record.candidate_eligibility == NOT_ELIGIBLE:
        return INELIGIBLE_NOTICE
    if record.candidate_eligibility != ELIGIBLE:
        return None
    if record.duplicate_rank >= 2:
        return DUPLICATE_NOTICE
    if record.duplicate_rank == 1:
        return CONFIRMATION_NOTICE
    # Both eligible with rank 0 cannot come out of rank_duplicate
    return None


def select_intake_event(record: ReferralRecord) -> Optional[NotificationEvent]:
    name = intake_event_name(record)
    if name is None:
        return None

    scout_subject, scout_body, candidate_subject, candidate_body = _INTAKE_TEMPLATES[name]
    return NotificationEvent(name=name, messages=[
        Message(record.scout_email, scout_subject, scout_body),
        Message(record.resolved_candidate_email, candidate_subject, candidate_body),
    ])


def select_scenario_event(record: ReferralRecord) -> Optional[NotificationEvent]:
    """Progress update for the scout of a valid referral, if its scenario is known."""
    template = SCENARIO_BODIES.get(record.trip_scenario)
    if template is None:
        return None

    return NotificationEvent(name=SCENARIO_NOTICE, messages=[
        Message(
            record.scout_email,
            SCENARIO_SUBJECT.format(phone=hash_phone(record.candidate_phone)),
            template.format(name=record.scout_name),
        ),
    ])
