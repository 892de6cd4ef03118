"""
Referral Engine — entry points invoked by the intake webhook and the job queue.

Intake runs four steps on the newest Referrals row:
  ELIGIBILITY → DUPLICATES → NOTIFICATIONS → ROUTING

The steps are pure functions over a ReferralRecord; the engine persists the
annotated intake row after the first two, then sends mail, then files the
record. Batch jobs iterate a snapshot and address rows by id.
"""
import logging
from typing import Dict, Optional

from app.config import RESOLVED, ProgramConfig
from app.pipeline.anonymize import hash_phone
from app.pipeline.base import IntakeOutcome, NotificationEvent, ReferralRecord
from app.pipeline.compensation import is_compensation_due
from app.pipeline.duplicates import rank_duplicate
from app.pipeline.eligibility import find_scout, validate_eligibility
from app.pipeline.escalation import build_readmitted_values, is_ready_for_readmission
from app.pipeline.reconcile import build_activity_map, plan_activity_updates
from app.pipeline.routing import choose_destination
from app.pipeline.selector import select_intake_event, select_scenario_event
from app.services.feed_sync import fetch_feed_rows
from app.services.notifications import notify_job_failed

logger = logging.getLogger('pipeline.manager')

_ANNOTATED_FIELDS = (
    'scout_eligibility', 'scout_email', 'scout_id', 'scout_name',
    'candidate_eligibility', 'candidate_id', 'resolved_candidate_email',
    'duplicate_rank',
)


class ReferralEngine:
    """
    The referral lifecycle engine.

    Args:
        store:    RecordStore (or anything with the same methods).
        notifier: Object with send(to_address, subject, body).
        program:  ProgramConfig with collection names and mail identity.
    """

    def __init__(self, store, notifier, program: ProgramConfig = None):
        self.store = store
        self.notifier = notifier
        self.program = program or ProgramConfig.from_env()

    # ── Intake ───────────────────────────────────────────────────────────────

    def on_intake(self) -> Optional[IntakeOutcome]:
        """
        Process the newest submission end to end.

        Any failure stops the remaining steps and is logged; writes already
        made stay in place. Returns None on failure or an empty intake log.
        """
        try:
            return self._run_intake()
        except Exception as e:
            logger.error("Intake failed: %s", e, exc_info=True)
            notify_job_failed('intake', str(e))
            return None

    def _run_intake(self) -> Optional[IntakeOutcome]:
        p = self.program
        row = self.store.read_last(p.referrals)
        if row is None:
            logger.warning("Intake triggered but %s is empty", p.referrals)
            return None
        record = ReferralRecord.from_row(row)

        scouts = self.store.read_all(p.scouts)
        churned = self.store.read_all(p.churned_candidates)
        record = validate_eligibility(record, scouts, churned, p.invalid_candidate_email)

        prior = [r for r in self.store.read_all(p.referrals) if r.id < record.row_id]
        record = rank_duplicate(record, prior)

        self.store.update_fields(p.referrals, record.row_id, {
            name: getattr(record, name) for name in _ANNOTATED_FIELDS
        })

        event = select_intake_event(record)
        if event is not None:
            self._dispatch(event)

        destination = choose_destination(record, p)
        self.store.append(destination, record.to_values())
        logger.info(
            "Referral %s (%s) filed in %s, event=%s",
            record.row_id, hash_phone(record.candidate_phone), destination,
            event.name if event else None,
        )
        return IntakeOutcome(record=record, destination=destination, event=event)

    # ── Periodic jobs ────────────────────────────────────────────────────────

    def run_scenario_notices(self) -> int:
        """Mail each scout of a valid referral its trip-progress update."""
        sent = 0
        for row in self.store.read_all(self.program.valid_referrals):
            event = select_scenario_event(ReferralRecord.from_row(row))
            if event is None:
                continue
            self._dispatch(event)
            sent += 1
        logger.info("Scenario notices: %d sent", sent)
        return sent

    def reconcile_activity(self) -> int:
        """Fill reactivation / last-activity dates from the activity feed."""
        p = self.program
        records = [ReferralRecord.from_row(r) for r in self.store.read_all(p.valid_referrals)]
        activity = build_activity_map(self.store.read_all(p.activity_feed))

        updates = plan_activity_updates(records, activity)
        for row_id, field, value in updates:
            self.store.update_field(p.valid_referrals, row_id, field, value)
        logger.info("Activity reconcile: %d of %d referrals updated", len(updates), len(records))
        return len(updates)

    def sweep_compensation(self) -> int:
        """Move Completed valid referrals to Compensation Due."""
        p = self.program
        self.store.require(p.compensation_due)
        moved = 0
        snapshot = self.store.read_all(p.valid_referrals)
        for row in reversed(snapshot):
            record = ReferralRecord.from_row(row)
            if not is_compensation_due(record):
                continue
            self.store.append(p.compensation_due, record.to_values())
            self.store.delete_row(p.valid_referrals, record.row_id)
            moved += 1
        logger.info("Compensation sweep: %d referrals moved", moved)
        return moved

    def process_escalations(self) -> int:
        """Re-admit escalated not-eligible referrals whose scout is known."""
        p = self.program
        self.store.require(p.valid_referrals)
        scouts = self.store.read_all(p.scouts)
        readmitted = 0
        for row in reversed(self.store.read_all(p.not_eligible_referrals)):
            if not is_ready_for_readmission(row):
                continue
            scout = find_scout(scouts, row.scout_code)
            if scout is None:
                logger.warning("Escalated referral %s has unknown scout code %s", row.id, row.scout_code)
                continue
            self.store.append(p.valid_referrals, build_readmitted_values(row, scout))
            self.store.update_field(p.not_eligible_referrals, row.id, 'resolution', RESOLVED)
            readmitted += 1
        logger.info("Escalations: %d referrals re-admitted", readmitted)
        return readmitted

    def sync_external_feed(self, source_id: str, source_collection: str, target_collection: str) -> int:
        """
        Replace target_collection with the rows of an external table.

        Returns the number of rows written, or 0 when the source is not
        configured (nothing is touched in that case).
        """
        if not source_id or not source_collection:
            logger.warning("Feed for %s not configured — skipping", target_collection)
            return 0
        self.store.require(target_collection)
        rows = fetch_feed_rows(source_id, source_collection)
        return self.store.clear_and_replace(target_collection, rows)

    def sync_churn_feed(self) -> int:
        feed = self.program.churn_feed
        return self.sync_external_feed(feed.source_id, feed.source_collection, self.program.churned_candidates)

    def sync_activity_feed(self) -> int:
        feed = self.program.activity_feed_source
        return self.sync_external_feed(feed.source_id, feed.source_collection, self.program.activity_feed)

    def clear_blocked_escalations(self) -> int:
        """Blank the manual escalation column of the blocked list."""
        p = self.program
        cleared = 0
        for row in self.store.read_all(p.blocked_list):
            if row.escalation:
                self.store.update_field(p.blocked_list, row.id, 'escalation', '')
                cleared += 1
        logger.info("Blocked list: %d escalation notes cleared", cleared)
        return cleared

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _dispatch(self, event: NotificationEvent):
        for message in event.messages:
            self.notifier.send(message.to, message.subject, message.body)


# Job name → engine method, for the scheduler trigger route and the RQ worker
JOBS: Dict[str, str] = {
    'scenario_notices':          'run_scenario_notices',
    'reconcile_activity':        'reconcile_activity',
    'sweep_compensation':        'sweep_compensation',
    'process_escalations':       'process_escalations',
    'sync_churn_feed':           'sync_churn_feed',
    'sync_activity_feed':        'sync_activity_feed',
    'clear_blocked_escalations': 'clear_blocked_escalations',
}
