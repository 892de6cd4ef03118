"""
Logging setup for the web process and RQ workers.

configure_logging() runs from create_app() and at the start of every RQ job.
Every line passes through PiiMaskingFilter first: referral logs talk about
drivers and scouts, and a phone number or email address must never reach
the log aggregator unmasked.

LOG_FORMAT picks "text" (default) or "json"; LOG_LEVEL defaults to INFO.
"""
import json
import logging
import os
import re
import sys
from datetime import datetime, timezone

from app.pipeline.anonymize import hash_email, hash_phone

# Digit runs long enough to be a phone number, optionally with a leading +
_PHONE_RE = re.compile(r'\+?\d{9,}')
_EMAIL_RE = re.compile(r'[\w.+-]+@[\w-]+(?:\.[\w-]+)+')

# Loggers that chatter at INFO about connections and queries
_NOISY_LOGGERS = [
    'urllib3',
    'sqlalchemy.engine',
    'rq.worker',
]


def mask_pii(text: str) -> str:
    """Mask every email address and phone number found in text."""
    text = _EMAIL_RE.sub(lambda m: hash_email(m.group(0)), text)
    return _PHONE_RE.sub(lambda m: hash_phone(m.group(0)), text)


class PiiMaskingFilter(logging.Filter):
    """Rewrites the rendered message of each record with contacts masked."""

    def filter(self, record):
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Bad format args; let the handler report it as usual
            return True
        masked = mask_pii(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for the hosted log drain."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(app=None):
    """Install a single masked stderr handler on the root logger."""
    level = getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO)
    use_json = os.getenv('LOG_FORMAT', 'text').lower() == 'json'

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(PiiMaskingFilter())
    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))

    root = logging.getLogger()
    root.setLevel(level)
    # Re-init from an RQ job must not stack handlers
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
