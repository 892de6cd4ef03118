"""
Referral lifecycle value types.

Intake steps take a ReferralRecord and return an updated copy. Nothing in
app.pipeline touches storage except the manager, which persists at step
boundaries.
"""
from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, List, Optional


# Fields copied between referral collections (everything except the row id)
REFERRAL_FIELDS = (
    'submitted_at',
    'scout_code',
    'candidate_phone',
    'candidate_email',
    'scout_name',
    'scout_email',
    'scout_eligibility',
    'candidate_eligibility',
    'scout_id',
    'candidate_id',
    'resolved_candidate_email',
    'duplicate_rank',
    'trip_scenario',
    'reactivation_date',
    'last_activity_date',
)


@dataclass(frozen=True)
class ReferralRecord:
    """One referral submission as it moves through the lifecycle."""
    scout_code: str = ''
    candidate_phone: str = ''
    candidate_email: str = ''
    scout_name: str = ''
    scout_email: str = ''
    scout_eligibility: str = ''
    candidate_eligibility: str = ''
    scout_id: str = ''
    candidate_id: str = ''
    resolved_candidate_email: str = ''
    duplicate_rank: int = 0
    trip_scenario: str = ''
    reactivation_date: Optional[date] = None
    last_activity_date: Optional[date] = None
    submitted_at: Optional[datetime] = None
    row_id: Optional[int] = None

    @classmethod
    def from_row(cls, row) -> 'ReferralRecord':
        """Build a record from any ORM row carrying the referral columns."""
        values = {name: getattr(row, name, None) for name in REFERRAL_FIELDS}
        for f in fields(cls):
            if values.get(f.name) is None and f.default == '':
                values[f.name] = ''
        if values.get('duplicate_rank') is None:
            values['duplicate_rank'] = 0
        return cls(row_id=getattr(row, 'id', None), **values)

    def to_values(self) -> Dict[str, Any]:
        """Column values for writing this record into any referral collection."""
        data = asdict(self)
        return {name: data[name] for name in REFERRAL_FIELDS if data[name] is not None}


@dataclass(frozen=True)
class Message:
    to: str
    subject: str
    body: str


@dataclass(frozen=True)
class NotificationEvent:
    """A named event and the mails it produces."""
    name: str
    messages: List[Message] = field(default_factory=list)


@dataclass(frozen=True)
class IntakeOutcome:
    """What happened to one submission."""
    record: ReferralRecord
    destination: str
    event: Optional[NotificationEvent] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'row_id': self.record.row_id,
            'scout_eligibility': self.record.scout_eligibility,
            'candidate_eligibility': self.record.candidate_eligibility,
            'duplicate_rank': self.record.duplicate_rank,
            'destination': self.destination,
            'event': self.event.name if self.event else None,
        }
