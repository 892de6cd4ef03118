"""
Engine lock — at most one entry point runs against the record store.

Intake webhooks and scheduled jobs both take this Redis lock, so the
duplicate count and routing of one submission never interleave with another
trigger.
"""
import logging
from contextlib import contextmanager

from redis.exceptions import LockError

from app import config, extensions
from app.exceptions import EngineBusyError

logger = logging.getLogger('services.locks')

ENGINE_LOCK_NAME = 'referrals:engine'


@contextmanager
def engine_lock(name: str = ENGINE_LOCK_NAME):
    lock = extensions.redis_client.lock(
        name,
        timeout=config.ENGINE_LOCK_TIMEOUT,
        blocking_timeout=config.ENGINE_LOCK_WAIT,
    )
    if not lock.acquire():
        raise EngineBusyError(f"Lock '{name}' still held after {config.ENGINE_LOCK_WAIT}s")
    try:
        yield
    finally:
        try:
            lock.release()
        except LockError:
            # Expired while we were running; another trigger may already hold it
            logger.warning("Lock '%s' expired before release", name)
