"""
Centralized configuration — env vars, collection names, program vocabulary.

Module-level constants are read once from the environment. The engine never
reads them directly: ProgramConfig.from_env() snapshots them into an immutable
object that is passed to every entry point.
"""
import os
from dataclasses import dataclass, field


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Redis (job queue + engine lock) ──────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
ENGINE_LOCK_TIMEOUT = int(os.getenv('ENGINE_LOCK_TIMEOUT', '600'))
ENGINE_LOCK_WAIT = int(os.getenv('ENGINE_LOCK_WAIT', '30'))

# ── PostgreSQL ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── Outgoing mail (SMTP) ──────────────────────────────────────────────────────
SMTP_HOST = os.getenv('SMTP_HOST', '')
SMTP_PORT = int(os.getenv('SMTP_PORT', '587'))
SMTP_USER = os.getenv('SMTP_USER', '')
SMTP_PASSWORD = os.getenv('SMTP_PASSWORD', '')
# Internal relays on port 25 usually speak neither TLS nor AUTH
SMTP_STARTTLS = os.getenv('SMTP_STARTTLS', 'true').lower() in ('1', 'true', 'yes')

MAIL_FROM = os.getenv('MAIL_FROM', 'no-reply@yourcompany.com')
MAIL_FROM_NAME = os.getenv('MAIL_FROM_NAME', 'Your Company Alias')
MAIL_REPLY_TO = os.getenv('MAIL_REPLY_TO', 'no-reply@yourcompany.com')

# Candidate address used when the referred driver is unknown, so no mail
# ever goes to an unverified mailbox.
INVALID_CANDIDATE_EMAIL = 'noreply-invalid@invalid-referrals.com'

# ── Slack ops alerts ─────────────────────────────────────────────────────────
SLACK_WEBHOOK_URL = os.getenv('SLACK_WEBHOOK_URL')

# ── Job trigger auth ─────────────────────────────────────────────────────────
JOBS_TOKEN = os.getenv('JOBS_TOKEN')

# ── External feeds (SQLAlchemy URL + table name) ─────────────────────────────
CHURN_FEED_SOURCE_URL = os.getenv('CHURN_FEED_SOURCE_URL', '')
CHURN_FEED_SOURCE_TABLE = os.getenv('CHURN_FEED_SOURCE_TABLE', '')
ACTIVITY_FEED_SOURCE_URL = os.getenv('ACTIVITY_FEED_SOURCE_URL', '')
ACTIVITY_FEED_SOURCE_TABLE = os.getenv('ACTIVITY_FEED_SOURCE_TABLE', '')

# ── Collections ──────────────────────────────────────────────────────────────
REFERRALS = 'Referrals'
SCOUTS = 'Scouts'
CHURNED_CANDIDATES = 'Churned Drivers'
VALID_REFERRALS = 'Valid Referrals'
NOT_ELIGIBLE_REFERRALS = 'Not Eligible Referrals'
ACTIVITY_FEED = 'Driver Activity'
COMPENSATION_DUE = 'Compensation Due'
BLOCKED_LIST = 'Blocked Drivers'

# ── Eligibility values ───────────────────────────────────────────────────────
ELIGIBLE = 'Eligible'
NOT_ELIGIBLE = 'Not Eligible'

# ── Trip scenarios (set by operations on Valid Referrals) ────────────────────
SCENARIO_NO_TRIPS = 'No Trips'
SCENARIO_IN_PROGRESS = 'In progress'
SCENARIO_MISSED = 'Missed'
SCENARIO_COMPLETED = 'Completed'

TRIP_SCENARIOS = [
    SCENARIO_NO_TRIPS,
    SCENARIO_IN_PROGRESS,
    SCENARIO_MISSED,
    SCENARIO_COMPLETED,
]

# ── Escalation values (set by operations on Not Eligible Referrals) ──────────
ESCALATED = 'Escalated'
RESOLVED = 'Resolved'


@dataclass(frozen=True)
class FeedSource:
    """Where an external feed is read from."""
    source_id: str = ''
    source_collection: str = ''


@dataclass(frozen=True)
class ProgramConfig:
    """Everything the engine needs to know about its surroundings."""
    referrals: str = REFERRALS
    scouts: str = SCOUTS
    churned_candidates: str = CHURNED_CANDIDATES
    valid_referrals: str = VALID_REFERRALS
    not_eligible_referrals: str = NOT_ELIGIBLE_REFERRALS
    activity_feed: str = ACTIVITY_FEED
    compensation_due: str = COMPENSATION_DUE
    blocked_list: str = BLOCKED_LIST

    mail_from: str = MAIL_FROM
    mail_from_name: str = MAIL_FROM_NAME
    mail_reply_to: str = MAIL_REPLY_TO
    invalid_candidate_email: str = INVALID_CANDIDATE_EMAIL

    churn_feed: FeedSource = field(default_factory=FeedSource)
    activity_feed_source: FeedSource = field(default_factory=FeedSource)

    @classmethod
    def from_env(cls, **overrides) -> 'ProgramConfig':
        values = dict(
            churn_feed=FeedSource(CHURN_FEED_SOURCE_URL, CHURN_FEED_SOURCE_TABLE),
            activity_feed_source=FeedSource(ACTIVITY_FEED_SOURCE_URL, ACTIVITY_FEED_SOURCE_TABLE),
        )
        values.update(overrides)
        return cls(**values)
