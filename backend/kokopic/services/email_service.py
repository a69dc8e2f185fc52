"""Email service using SendGrid."""

import logging
from typing import Protocol

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your Kokopic account"


class Notifier(Protocol):
    """Out-of-band delivery channel. Returns True when the message was accepted."""

    def send(self, recipient: str, subject: str, body: str) -> bool: ...


def build_verification_email_body(token: str, frontend_url: str) -> str:
    """Plain-text body carrying the verification link."""
    verify_url = f"{frontend_url.rstrip('/')}/verify-email/{token}"
    return (
        "Welcome to Kokopic!\n\n"
        "Please confirm your email address by opening the link below:\n\n"
        f"{verify_url}\n\n"
        "This link is valid for 24 hours.\n"
        "If you didn't create an account, you can ignore this email.\n"
    )


class EmailService:
    """Notifier sending transactional plain-text emails via SendGrid."""

    def __init__(self, api_key: str, from_address: str, from_name: str) -> None:
        self._api_key = api_key
        self._from_address = from_address
        self._from_name = from_name

    def send(self, recipient: str, subject: str, body: str) -> bool:
        """Send email via SendGrid. Returns True if successful."""
        if not self._api_key:
            logger.warning("SendGrid API key not configured, skipping email send")
            return False

        message = Mail(
            from_email=(self._from_address, self._from_name),
            to_emails=recipient,
            subject=subject,
            plain_text_content=body,
        )

        try:
            sg = SendGridAPIClient(self._api_key)
            response = sg.send(message)
            logger.info(f"Email sent to {recipient}, status: {response.status_code}")
            return response.status_code in (200, 201, 202)
        except Exception:
            logger.exception(f"Failed to send email to {recipient}")
            return False
