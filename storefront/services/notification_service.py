# storefront/services/notification_service.py
import logging
import re
import smtplib
from typing import Callable

from storefront.core.email_client import send_email
from storefront.core.errors import NotificationError

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Outgoing account emails (signup welcome, password reset).

    Sending never fails the caller: `notify` wraps transport errors in
    NotificationError, and the public helpers catch and log it. They are
    meant to run as FastAPI background tasks after the response is built.
    """

    def __init__(self, sender: Callable[..., None] = send_email):
        self.sender = sender

    def notify(self, to_email: str, subject: str, html_body: str) -> None:
        """
        Send one HTML email.

        Raises:
            NotificationError: SMTP misconfiguration or transport failure.
        """
        try:
            self.sender(
                to_email=to_email,
                subject=subject,
                text_body=_strip_tags(html_body),
                html_body=html_body,
            )
        except (RuntimeError, smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Could not send '{subject}' to {to_email}: {e}") from e

    def send_signup_welcome(self, to_email: str) -> bool:
        return self._send_logged(
            to_email,
            "Regarding Signup",
            "<strong>Account successfully created.</strong>",
        )

    def send_password_reset(self, to_email: str, reset_link: str) -> bool:
        return self._send_logged(
            to_email,
            "Password Reset",
            "<h2>You requested a password reset</h2>"
            f'<p>Click this <a href="{reset_link}">link</a> to set a new password.</p>',
        )

    def _send_logged(self, to_email: str, subject: str, html_body: str) -> bool:
        try:
            self.notify(to_email, subject, html_body)
        except NotificationError as e:
            logger.warning("Notification failed: %s", e)
            return False
        logger.info("Sent '%s' email to %s", subject, to_email)
        return True


def _strip_tags(html: str) -> str:
    """Plain-text fallback for the HTML body."""
    text = re.sub(r"<[^>]+>", " ", html)
    return re.sub(r"\s+", " ", text).strip()
