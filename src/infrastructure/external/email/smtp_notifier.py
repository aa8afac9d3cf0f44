"""
SMTP notifier for password-reset emails.

Delivery runs in a worker thread (smtplib is blocking). Problems are logged
and reported as False, never raised: a reset request succeeds even when the
mail could not be sent.
"""

import asyncio
import html
import smtplib
from email.message import EmailMessage

from email_validator import EmailNotValidError, validate_email

from src.infrastructure.config.settings import Settings, get_settings
from src.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

RESET_SUBJECT = "Reset your password"


def _render_reset_body(reset_link: str) -> str:
    link = html.escape(reset_link, quote=True)
    return (
        "<p>We received a request to reset your password.</p>"
        f'<p><a href="{link}">Reset password</a></p>'
        "<p>The link expires in one hour. If you did not ask for a reset, ignore this email.</p>"
    )


class SmtpNotifier:
    """INotifier backed by an SMTP relay"""

    def __init__(self, settings: Settings | None = None, timeout: float = 15.0) -> None:
        self.settings = settings or get_settings()
        self.timeout = timeout

    @staticmethod
    def _is_valid_address(address: str | None) -> bool:
        if not address:
            return False
        try:
            validate_email(address, check_deliverability=False)
        except EmailNotValidError:
            return False
        return True

    def _send_sync(self, message: EmailMessage) -> None:
        s = self.settings
        with smtplib.SMTP(host=s.smtp_host, port=s.smtp_port, timeout=self.timeout) as smtp:
            smtp.ehlo()
            if s.smtp_use_tls:
                smtp.starttls()
                smtp.ehlo()
            if s.smtp_username and s.smtp_password:
                smtp.login(s.smtp_username, s.smtp_password)
            smtp.send_message(message)

    async def send_password_reset(self, recipient: str, reset_link: str) -> bool:
        sender = self.settings.smtp_from_email
        if not self._is_valid_address(sender):
            logger.warning("Password reset email skipped: sender address is not configured or invalid")
            return False
        if not self._is_valid_address(recipient):
            logger.warning("Password reset email skipped: invalid recipient address")
            return False
        if not self.settings.smtp_host:
            logger.warning("Password reset email skipped: SMTP host is not configured")
            return False

        message = EmailMessage()
        message["Subject"] = RESET_SUBJECT
        message["From"] = sender
        message["To"] = recipient
        message.set_content(f"Reset your password: {reset_link}")
        message.add_alternative(_render_reset_body(reset_link), subtype="html")

        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send password reset email: %s", e)
            return False

        logger.info("Password reset email sent")
        return True
