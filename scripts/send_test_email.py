"""
Send a test certificate e-mail with the configured SMTP settings.

Usage:
    python scripts/send_test_email.py [recipient]

Without a recipient the mail goes to the configured SMTP/EMAIL user.
"""

import asyncio
import sys

from certify.core.config import get_settings
from certify.services.email_service import EmailNotifier


async def send_test(recipient: str) -> bool:
    settings = get_settings()
    print(f"Host: {settings.mail_host}:{settings.SMTP_PORT} (secure={settings.SMTP_SECURE})")
    print(f"User: {settings.mail_user or '(not set)'}")

    notifier = EmailNotifier(settings)
    result = await notifier.send_certificate_email(
        recipient,
        "Test Recipient",
        settings.PLACEHOLDER_IMAGE_URL,
        cert_id="HF-0000-0000",
    )
    if result.success:
        print(f"✅ Email sent to {recipient}")
    else:
        print(f"❌ Email failed: {result.error}")
    return result.success


if __name__ == "__main__":
    settings = get_settings()
    to = sys.argv[1] if len(sys.argv) > 1 else settings.mail_user
    if not to:
        print("❌ No recipient given and no SMTP_USER/EMAIL_USER configured")
        sys.exit(1)
    sys.exit(0 if asyncio.run(send_test(to)) else 1)
