"""
Email Service

Sends certificate e-mails over SMTP.

A failed send is reported to the caller and never raised; it does not undo
the certificate record and is not retried.
"""

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from certify.core.config import Settings


logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    """Outcome of one e-mail send."""

    success: bool
    error: Optional[str] = None


def get_certificate_email_html(full_name: str, certificate_url: str, verify_url: str) -> str:
    """Generate HTML content for the certificate email."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <style>
            body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; margin: 0; padding: 0; background-color: #f5f5f5; }}
            .container {{ max-width: 600px; margin: 40px auto; background: white; border-radius: 12px; box-shadow: 0 4px 20px rgba(0,0,0,0.1); overflow: hidden; }}
            .content {{ padding: 40px; }}
            .button {{ display: inline-block; padding: 10px 20px; background: #007bff; color: white; text-decoration: none; border-radius: 5px; }}
            p {{ color: #374151; line-height: 1.6; }}
        </style>
    </head>
    <body>
        <div class="container">
            <div class="content">
                <h3>Congratulations, {full_name}!</h3>
                <p>We are pleased to present your certificate of completion.</p>
                <p>You can view and download your certificate here:</p>
                <a class="button" href="{certificate_url}">View Certificate</a>
                <p>Anyone can confirm it is genuine at <a href="{verify_url}">{verify_url}</a>.</p>
                <br>
                <p>Best regards,<br>High Furries Team</p>
            </div>
        </div>
    </body>
    </html>
    """


def get_certificate_email_text(full_name: str, certificate_url: str, verify_url: str) -> str:
    """Generate plain text content for the certificate email."""
    return f"""
Congratulations, {full_name}!

We are pleased to present your certificate of completion.

View and download your certificate: {certificate_url}

Verify it at: {verify_url}

Best regards,
High Furries Team
    """


class EmailNotifier:
    """SMTP sender configured from Settings."""

    subject = "Your High Furries Certificate"

    def __init__(self, settings: Settings):
        self.settings = settings

    def _build_message(self, to_email: str, full_name: str, certificate_url: str, verify_url: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = self.subject
        msg["From"] = f"{self.settings.EMAIL_FROM_NAME} <{self.settings.mail_from_address}>"
        msg["To"] = to_email

        # Attach plain text and HTML versions
        msg.attach(MIMEText(get_certificate_email_text(full_name, certificate_url, verify_url), "plain"))
        msg.attach(MIMEText(get_certificate_email_html(full_name, certificate_url, verify_url), "html"))
        return msg

    def _deliver(self, to_email: str, msg: MIMEMultipart) -> None:
        settings = self.settings
        if settings.SMTP_SECURE:
            server = smtplib.SMTP_SSL(settings.mail_host, settings.SMTP_PORT)
        else:
            server = smtplib.SMTP(settings.mail_host, settings.SMTP_PORT)

        with server:
            if not settings.SMTP_SECURE:
                server.starttls()
            server.login(settings.mail_user, settings.mail_password)
            server.sendmail(settings.mail_from_address, to_email, msg.as_string())

    async def send_certificate_email(
        self,
        to_email: str,
        full_name: str,
        certificate_url: str,
        cert_id: str = "",
    ) -> NotificationResult:
        """
        Send the certificate link to a recipient.

        Args:
            to_email: Recipient email address.
            full_name: Candidate name for personalization.
            certificate_url: Public URL of the rendered certificate.
            cert_id: Used to build the verification link.

        Returns:
            NotificationResult: success flag plus error detail on failure.
        """
        if not to_email:
            return NotificationResult(False, "No recipient email address")

        verify_url = self.settings.verification_url(cert_id)

        if not self.settings.mail_configured:
            # In development mode, just log the link
            if self.settings.is_development:
                logger.info(f"[DEV MODE] Certificate email for {to_email}: {certificate_url}")
                return NotificationResult(True)
            logger.error(f"Mail delivery is not configured, cannot email {to_email}")
            return NotificationResult(False, "Mail delivery is not configured")

        try:
            msg = self._build_message(to_email, full_name, certificate_url, verify_url)
            await asyncio.to_thread(self._deliver, to_email, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending email to {to_email}: {e}")
            return NotificationResult(False, str(e))

        logger.info(f"Email sent to {to_email}")
        return NotificationResult(True)
