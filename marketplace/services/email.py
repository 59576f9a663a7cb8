"""
Outbound email for listing validation links.

Two backends are available. ``console`` only logs the message, which is the
default outside production. ``smtp`` delivers through the configured SMTP
server; the blocking smtplib call runs in a worker thread.
"""

from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional
from urllib.parse import urlencode
from fastapi.concurrency import run_in_threadpool
from marketplace.config import settings
import html
import logging
import smtplib
import uuid

logger = logging.getLogger(__name__)


@dataclass
class EmailResult:
    success: bool
    error: Optional[str] = None


def build_validation_link(listing_id: uuid.UUID, token: str) -> str:
    query = urlencode({"id": str(listing_id), "token": token})
    return f"{settings.public_base_url.rstrip('/')}{settings.validation_path}?{query}"


class EmailService:
    """Sends transactional emails. Delivery failures are reported, never raised."""

    def __init__(self, backend: Optional[str] = None):
        self.backend = backend or settings.mail_backend

    def build_validation_message(self, to: str, listing_title: str, link: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = "Confirm your listing"
        msg["From"] = settings.mail_from
        msg["To"] = to
        msg.set_content(
            f"Thank you for posting \"{listing_title}\".\n\n"
            f"Confirm the listing by opening the link below. The link is valid for "
            f"{settings.validation_token_ttl_hours} hours.\n\n{link}\n\n"
            "If you did not post this listing, ignore this email."
        )
        msg.add_alternative(
            f"<p>Thank you for posting <strong>{html.escape(listing_title)}</strong>.</p>"
            f"<p><a href=\"{html.escape(link)}\">Confirm your listing</a></p>"
            f"<p>The link is valid for {settings.validation_token_ttl_hours} hours.</p>",
            subtype="html",
        )
        return msg

    async def send_validation_email(
        self,
        to: str,
        listing_title: str,
        listing_id: uuid.UUID,
        token: str
    ) -> EmailResult:
        """
        Email the validation link for a pending listing.

        Args:
            to: Recipient address
            listing_title: Shown in the message body
            listing_id: Listing to validate
            token: Validation token

        Returns:
            EmailResult; ``success`` is False when delivery failed
        """
        link = build_validation_link(listing_id, token)
        message = self.build_validation_message(to, listing_title, link)
        return await self.send(message, link=link)

    async def send(self, message: EmailMessage, link: Optional[str] = None) -> EmailResult:
        if self.backend != "smtp":
            logger.info(f"Email to {message['To']} not delivered (console backend). Link: {link}")
            return EmailResult(success=True)

        try:
            await run_in_threadpool(self._deliver_smtp, message)
            logger.info(f"Email sent to {message['To']}: {message['Subject']}")
            return EmailResult(success=True)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {message['To']}: {e}", exc_info=True)
            return EmailResult(success=False, error=str(e))

    def _deliver_smtp(self, message: EmailMessage) -> None:
        if settings.smtp_use_ssl:
            server = smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout)
        else:
            server = smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout)

        with server:
            server.ehlo()
            if not settings.smtp_use_ssl and server.has_extn("starttls"):
                server.starttls()
                server.ehlo()
            if settings.smtp_username and settings.smtp_password:
                server.login(settings.smtp_username, settings.smtp_password)
            server.send_message(message)


def get_email_service() -> EmailService:
    return EmailService()
