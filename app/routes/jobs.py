"""
Job trigger route — the external scheduler (cron) POSTs here on a cadence.

Jobs are queued on RQ and executed by the worker, never inline.
"""
import logging

from flask import Blueprint, request, jsonify

from app import config
from app.pipeline.jobs import enqueue_job
from app.pipeline.manager import JOBS

logger = logging.getLogger('routes.jobs')

bp = Blueprint('jobs', __name__)


@bp.route('/api/jobs/<job_name>', methods=['POST'])
def trigger_job(job_name):
    if config.JOBS_TOKEN and request.headers.get('X-Jobs-Token') != config.JOBS_TOKEN:
        return jsonify({'error': 'unauthorized'}), 401

    if job_name not in JOBS:
        return jsonify({'error': f'Unknown job: {job_name}', 'available': list(JOBS)}), 404

    try:
        job_id = enqueue_job(job_name)
    except Exception as e:
        logger.error("Failed to enqueue %s: %s", job_name, e)
        return jsonify({'error': 'queue unavailable'}), 503

    return jsonify({'status': 'queued', 'job': job_name, 'job_id': job_id}), 202
