"""Tests for app.services.locks — the Redis engine lock."""
import pytest
from redis.exceptions import LockError

from app.exceptions import EngineBusyError
from app.services.locks import ENGINE_LOCK_NAME, engine_lock


class TestEngineLock:

    def test_acquires_and_releases(self, mock_redis):
        with engine_lock():
            pass
        mock_redis.lock.assert_called_once()
        assert mock_redis.lock.call_args.args[0] == ENGINE_LOCK_NAME
        lock = mock_redis.lock.return_value
        lock.acquire.assert_called_once()
        lock.release.assert_called_once()

    def test_busy_lock_raises(self, mock_redis):
        mock_redis.lock.return_value.acquire.return_value = False
        with pytest.raises(EngineBusyError):
            with engine_lock():
                pytest.fail("body must not run without the lock")

    def test_released_when_body_fails(self, mock_redis):
        with pytest.raises(RuntimeError):
            with engine_lock():
                raise RuntimeError('boom')
        mock_redis.lock.return_value.release.assert_called_once()

    def test_expired_lock_on_release_is_tolerated(self, mock_redis):
        mock_redis.lock.return_value.release.side_effect = LockError('expired')
        with engine_lock():
            pass
