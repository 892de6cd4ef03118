"""Tests for app.routes.jobs — scheduler trigger endpoint."""
from unittest.mock import patch


class TestTriggerJob:

    @patch('app.routes.jobs.enqueue_job', return_value='job-1')
    def test_known_job_queued(self, mock_enqueue, client):
        resp = client.post('/api/jobs/sweep_compensation')

        assert resp.status_code == 202
        assert resp.get_json() == {'status': 'queued', 'job': 'sweep_compensation', 'job_id': 'job-1'}
        mock_enqueue.assert_called_once_with('sweep_compensation')

    @patch('app.routes.jobs.enqueue_job')
    def test_unknown_job_404(self, mock_enqueue, client):
        resp = client.post('/api/jobs/launch_rockets')

        assert resp.status_code == 404
        assert 'process_escalations' in resp.get_json()['available']
        mock_enqueue.assert_not_called()

    @patch('app.routes.jobs.enqueue_job', side_effect=ConnectionError('redis down'))
    def test_queue_unavailable_503(self, mock_enqueue, client):
        resp = client.post('/api/jobs/reconcile_activity')
        assert resp.status_code == 503

    @patch('app.routes.jobs.enqueue_job', return_value='job-2')
    def test_token_required_when_configured(self, mock_enqueue, client):
        with patch('app.config.JOBS_TOKEN', 's3cret'):
            denied = client.post('/api/jobs/scenario_notices')
            allowed = client.post('/api/jobs/scenario_notices', headers={'X-Jobs-Token': 's3cret'})

        assert denied.status_code == 401
        assert allowed.status_code == 202
        mock_enqueue.assert_called_once_with('scenario_notices')
