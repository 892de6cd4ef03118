"""Tests for app.logging_config — masked referral logs."""
import json
import logging
import os
from unittest.mock import patch

import pytest

from app.logging_config import PiiMaskingFilter, configure_logging, mask_pii


@pytest.fixture(autouse=True)
def _reset_root_logger():
    root = logging.getLogger()
    original_level = root.level
    original_handlers = root.handlers[:]
    yield
    root.setLevel(original_level)
    root.handlers = original_handlers


def _configure(**env):
    values = {'LOG_FORMAT': 'text', 'LOG_LEVEL': 'INFO'}
    values.update(env)
    with patch.dict(os.environ, values):
        configure_logging()


class TestMaskPii:

    def test_phone_number_masked(self):
        assert mask_pii('referral for 0712345678 filed') == 'referral for 07123****5678 filed'

    def test_international_phone_masked(self):
        assert mask_pii('call +254712345678') == 'call +2547****5678'

    def test_email_masked(self):
        assert mask_pii('mail to jane.driver@example.com sent') == 'mail to ja****@example.com sent'

    def test_short_numbers_and_dates_untouched(self):
        text = 'row 42 moved on 2026-03-01, 3 referrals updated'
        assert mask_pii(text) == text

    def test_already_masked_values_untouched(self):
        text = 'Referral 7 (07123****5678) to ja****@example.com'
        assert mask_pii(text) == text


class TestPiiMaskingFilter:

    def test_rewrites_formatted_args(self):
        record = logging.LogRecord(
            name='services.notifications', level=logging.INFO, pathname='', lineno=0,
            msg="Mail '%s' sent to %s", args=('Welcome', 'amina@example.com'), exc_info=None,
        )
        assert PiiMaskingFilter().filter(record) is True
        assert record.getMessage() == "Mail 'Welcome' sent to am****@example.com"

    def test_clean_record_keeps_its_args(self):
        record = logging.LogRecord(
            name='pipeline.manager', level=logging.INFO, pathname='', lineno=0,
            msg='Compensation sweep: %d referrals moved', args=(3,), exc_info=None,
        )
        PiiMaskingFilter().filter(record)
        assert record.args == (3,)


class TestConfigureLogging:

    def test_text_output_is_masked(self, capsys):
        _configure()
        logging.getLogger('routes.intake').warning('Duplicate from %s', '0799000111')
        output = capsys.readouterr().err
        assert 'routes.intake' in output
        assert '07990****0111' in output
        assert '0799000111' not in output

    def test_json_output_is_masked(self, capsys):
        _configure(LOG_FORMAT='json')
        logging.getLogger('pipeline.jobs').error('Job failed for paul.driver@example.com')
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed['logger'] == 'pipeline.jobs'
        assert parsed['level'] == 'ERROR'
        assert parsed['message'] == 'Job failed for pa****@example.com'

    def test_level_from_env(self):
        _configure(LOG_LEVEL='warning')
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        _configure(LOG_LEVEL='CHATTY')
        assert logging.getLogger().level == logging.INFO

    def test_worker_and_query_loggers_quieted(self):
        _configure()
        for name in ('sqlalchemy.engine', 'rq.worker', 'urllib3'):
            assert logging.getLogger(name).level == logging.WARNING

    def test_rerun_from_job_keeps_one_handler(self):
        _configure()
        _configure()
        assert len(logging.getLogger().handlers) == 1


class TestEngineLogsAreAnonymized:
    """Engine log lines never carry a full phone number."""

    def test_eligibility_log_masks_phone(self, capsys, make_record):
        from app.pipeline.eligibility import validate_eligibility

        _configure()
        validate_eligibility(make_record(candidate_phone='0712345678'), [], [])
        output = capsys.readouterr().err
        assert 'pipeline.eligibility' in output
        assert '07123****5678' in output
        assert '0712345678' not in output
