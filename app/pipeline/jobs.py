"""
Job runner — builds an engine on a fresh session and runs one entry point
under the engine lock.

Scheduled jobs are enqueued on RQ by the /api/jobs route and executed by
`rq worker` through run_job(). Intake runs inline from the webhook.
"""
import logging

from app.config import ProgramConfig
from app.pipeline.manager import JOBS, ReferralEngine
from app.services.locks import engine_lock
from app.services.notifications import SmtpNotifier, notify_job_failed
from app.services.record_store import RecordStore

logger = logging.getLogger('pipeline.jobs')

JOB_TIMEOUT = 1800

_queue = None


def _get_queue():
    global _queue
    if _queue is None:
        from app.extensions import redis_client
        from rq import Queue
        _queue = Queue(connection=redis_client)
    return _queue


def build_engine(session, program: ProgramConfig = None) -> ReferralEngine:
    program = program or ProgramConfig.from_env()
    return ReferralEngine(
        store=RecordStore(session),
        notifier=SmtpNotifier.from_program(program),
        program=program,
    )


def enqueue_job(job_name: str) -> str:
    """Queue a scheduled job for the RQ worker. Returns the RQ job id."""
    if job_name not in JOBS:
        raise ValueError(f"Unknown job: {job_name}. Available: {list(JOBS)}")
    job = _get_queue().enqueue(run_job, job_name, job_timeout=JOB_TIMEOUT)
    logger.info("Enqueued %s as %s", job_name, job.id)
    return job.id


def run_job(job_name: str):
    """
    Execute one scheduled job (RQ entry point).

    Failures are logged, alerted to Slack and re-raised so RQ marks the job
    failed; the next scheduled trigger retries from scratch.
    """
    if job_name not in JOBS:
        raise ValueError(f"Unknown job: {job_name}. Available: {list(JOBS)}")

    from app.database import get_session
    from app.logging_config import configure_logging

    # RQ workers never go through create_app()
    configure_logging()

    session = get_session()
    try:
        with engine_lock():
            engine = build_engine(session)
            result = getattr(engine, JOBS[job_name])()
        logger.info("Job %s finished: %s", job_name, result)
        return result
    except Exception as e:
        session.rollback()
        logger.error("Job %s failed", job_name, exc_info=True)
        notify_job_failed(job_name, str(e))
        raise
    finally:
        session.close()
