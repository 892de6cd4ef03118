"""
Intake webhook — called by the referral form on every submission.

Appends the submission to the Referrals log and runs the intake pipeline
inline, under the engine lock so two submissions never interleave.
"""
import logging

from flask import Blueprint, request, jsonify

from app.config import ProgramConfig
from app.exceptions import ConfigurationError, EngineBusyError
from app.pipeline.jobs import build_engine
from app.services.locks import engine_lock

logger = logging.getLogger('routes.intake')

bp = Blueprint('intake', __name__)

FORM_FIELDS = ('scout_code', 'candidate_phone', 'candidate_email')
REQUIRED_FIELDS = ('scout_code', 'candidate_phone')


@bp.route('/webhook/intake', methods=['POST'])
def intake_webhook():
    """Record a referral submission and process it."""
    data = request.get_json(silent=True) or request.form.to_dict()
    if not isinstance(data, dict):
        return jsonify({'status': 'rejected', 'error': 'Expected a JSON object or form fields'}), 400

    submission = {name: str(data.get(name) or '').strip() for name in FORM_FIELDS}
    missing = [name for name in REQUIRED_FIELDS if not submission[name]]
    if missing:
        return jsonify({'status': 'rejected', 'missing': missing}), 400

    from app.database import get_session

    session = get_session()
    try:
        with engine_lock():
            engine = build_engine(session, ProgramConfig.from_env())
            engine.store.append(engine.program.referrals, submission)
            outcome = engine.on_intake()
    except EngineBusyError as e:
        logger.warning("Intake rejected: %s", e)
        return jsonify({'status': 'busy'}), 503
    except ConfigurationError as e:
        logger.error("Intake could not be recorded: %s", e)
        return jsonify({'status': 'failed'}), 500
    finally:
        session.close()

    if outcome is None:
        return jsonify({'status': 'failed'}), 500
    return jsonify({'status': 'processed', **outcome.to_dict()}), 200
