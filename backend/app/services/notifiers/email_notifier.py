"""
Send birthday messages by email via SMTP (Google Gmail or other).
Set SMTP_USER, SMTP_PASSWORD (and optionally NOTIFY_FROM) in .env. Use a Gmail App Password (not your normal password).
"""
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.config import settings

logger = logging.getLogger(__name__)


def _from_address() -> str:
    if settings.notify_from:
        return settings.notify_from
    if settings.smtp_user:
        return f"Birthday Bot <{settings.smtp_user}>"
    return "Birthday Bot <noreply@localhost>"


def _one_line(text: str) -> str:
    # Header values must not carry CR/LF
    return " ".join((text or "").split())


class EmailNotifier:
    notifier_id = "email"

    def __init__(self, smtp_factory=smtplib.SMTP):
        self._smtp_factory = smtp_factory

    def send(self, name: str, email: str, message: str) -> bool:
        """
        Send one plain + html birthday email. Returns False when SMTP is not configured
        or the recipient is empty; SMTP errors propagate so the dispatcher can retry.
        """
        to_email = (email or "").strip()
        if not to_email:
            logger.warning("Birthday email for %s skipped: no recipient address", name)
            return False
        user = settings.smtp_user
        password = settings.smtp_password
        if not user or not password:
            logger.warning("SMTP_USER or SMTP_PASSWORD not set; cannot send birthday email to %s", to_email)
            return False
        msg = MIMEMultipart("alternative")
        msg["Subject"] = f"Happy Birthday, {_one_line(name)}!"
        msg["From"] = _from_address()
        msg["To"] = to_email
        msg.attach(MIMEText(message, "plain"))
        msg.attach(MIMEText(f"<p style='font-family:sans-serif'>{html.escape(message)}</p>", "html"))
        with self._smtp_factory(settings.smtp_host, settings.smtp_port, timeout=10) as server:
            server.starttls()
            server.login(user, password)
            server.sendmail(user, [to_email], msg.as_string())
        logger.info("Birthday email sent to %s", to_email)
        return True
