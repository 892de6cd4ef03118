"""Tests for app.routes.intake — the referral form webhook."""
from unittest.mock import patch

import pytest

from app.models.referral import NotEligibleReferral, Referral, ValidReferral


@pytest.fixture
def sent_mail():
    """Capture SmtpNotifier.send calls without touching the network."""
    with patch('app.services.notifications.SmtpNotifier.send', return_value=True) as mock_send:
        yield mock_send


@pytest.mark.usefixtures('seed_reference', 'mock_redis')
class TestIntakeWebhook:
    """POST /webhook/intake records a submission and runs the intake pipeline."""

    def test_valid_referral_processed(self, client, db_session, sent_mail):
        resp = client.post('/webhook/intake', json={
            'scout_code': 'SC-001',
            'candidate_phone': '0712345678',
            'candidate_email': 'jane.driver@example.com',
        })

        assert resp.status_code == 200
        data = resp.get_json()
        assert data['status'] == 'processed'
        assert data['destination'] == 'Valid Referrals'
        assert data['duplicate_rank'] == 1
        assert db_session.query(Referral).count() == 1
        assert db_session.query(ValidReferral).count() == 1
        assert [c.args[0] for c in sent_mail.call_args_list] == [
            'amina@example.com', 'jane.driver@example.com',
        ]

    def test_form_encoded_submission(self, client, db_session, sent_mail):
        resp = client.post('/webhook/intake', data={
            'scout_code': 'SC-999',
            'candidate_phone': '0712345678',
        })

        assert resp.status_code == 200
        data = resp.get_json()
        assert data['scout_eligibility'] == 'Not Eligible'
        assert data['destination'] == 'Not Eligible Referrals'
        assert db_session.query(NotEligibleReferral).count() == 1

    def test_missing_fields_rejected(self, client, db_session):
        resp = client.post('/webhook/intake', json={'candidate_email': 'x@example.com'})

        assert resp.status_code == 400
        assert resp.get_json()['missing'] == ['scout_code', 'candidate_phone']
        assert db_session.query(Referral).count() == 0

    @pytest.mark.parametrize('body', [['x'], 'SC-001', 42])
    def test_non_object_json_rejected(self, client, db_session, body):
        resp = client.post('/webhook/intake', json=body)

        assert resp.status_code == 400
        assert resp.get_json()['status'] == 'rejected'
        assert db_session.query(Referral).count() == 0

    def test_busy_engine_returns_503(self, client, mock_redis, db_session):
        mock_redis.lock.return_value.acquire.return_value = False
        resp = client.post('/webhook/intake', json={
            'scout_code': 'SC-001', 'candidate_phone': '0712345678',
        })

        assert resp.status_code == 503
        assert resp.get_json()['status'] == 'busy'
        assert db_session.query(Referral).count() == 0

    @patch('app.pipeline.manager.notify_job_failed')
    def test_pipeline_failure_returns_500(self, mock_notify, client, sent_mail):
        with patch('app.pipeline.manager.choose_destination', side_effect=RuntimeError('boom')):
            resp = client.post('/webhook/intake', json={
                'scout_code': 'SC-001', 'candidate_phone': '0712345678',
            })

        assert resp.status_code == 500
        assert resp.get_json()['status'] == 'failed'
        mock_notify.assert_called_once()
