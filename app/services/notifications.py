"""
Notifications — referral mail over SMTP, ops alerts over Slack webhook.

Notification failure never blocks the engine: send() and the alert helpers
log and return.
"""
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

import requests

from app import config
from app.pipeline.anonymize import hash_email

logger = logging.getLogger('services.notifications')


class SmtpNotifier:
    """Sends plain-text mail with a fixed sender identity."""

    def __init__(
        self,
        sender: str = None,
        sender_name: str = None,
        reply_to: str = None,
        host: str = None,
        port: int = None,
        user: str = None,
        password: str = None,
        starttls: bool = None,
    ):
        self.sender = sender or config.MAIL_FROM
        self.sender_name = sender_name or config.MAIL_FROM_NAME
        self.reply_to = reply_to or config.MAIL_REPLY_TO
        self.host = host if host is not None else config.SMTP_HOST
        self.port = port or config.SMTP_PORT
        self.user = user if user is not None else config.SMTP_USER
        self.password = password if password is not None else config.SMTP_PASSWORD
        self.starttls = starttls if starttls is not None else config.SMTP_STARTTLS

    @classmethod
    def from_program(cls, program) -> 'SmtpNotifier':
        return cls(
            sender=program.mail_from,
            sender_name=program.mail_from_name,
            reply_to=program.mail_reply_to,
        )

    @property
    def configured(self) -> bool:
        return bool(self.host)

    @property
    def authenticated(self) -> bool:
        return bool(self.user and self.password)

    def build_message(self, to_address: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg['Subject'] = subject
        msg['From'] = formataddr((self.sender_name, self.sender))
        msg['To'] = to_address
        msg['Reply-To'] = self.reply_to
        msg.set_content(body)
        return msg

    def send(self, to_address: str, subject: str, body: str) -> bool:
        """Best-effort delivery. Returns True when the SMTP server accepted it."""
        if not to_address:
            logger.warning("Skipping mail '%s': no recipient", subject)
            return False
        if not self.configured:
            logger.warning("Skipping mail to %s: SMTP_HOST not set", hash_email(to_address))
            return False

        try:
            msg = self.build_message(to_address, subject, body)
            with smtplib.SMTP(self.host, self.port, timeout=30) as s:
                if self.starttls:
                    s.starttls()
                if self.authenticated:
                    s.login(self.user, self.password)
                s.send_message(msg)
            logger.info("Mail '%s' sent to %s", subject, hash_email(to_address))
            return True
        except Exception:
            logger.error("Failed to send mail to %s", hash_email(to_address), exc_info=True)
            return False


def notify_job_failed(job_name: str, error: str):
    """Post an engine failure alert to Slack."""
    if not config.SLACK_WEBHOOK_URL:
        return

    try:
        blocks = [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": f"Referral job FAILED — {job_name}",
                }
            },
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"*Error:* ```{error[:500]}```"}
            },
        ]
        requests.post(config.SLACK_WEBHOOK_URL, json={"blocks": blocks}, timeout=10)
        logger.info("Failure alert for %s sent", job_name)

    except Exception:
        logger.error("Failed to send failure alert for %s", job_name, exc_info=True)
