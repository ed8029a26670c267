"""
Email Service

Sends password-recovery OTP codes via SMTP.
"""

from email.mime.text import MIMEText

import aiosmtplib
from fastapi import Depends

from jobsearch.core.config import Settings, get_settings
from jobsearch.core.logger import get_logger

logger = get_logger(__name__)


class EmailService:
    """Service for sending emails"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.enabled = settings.smtp_enabled

    async def send_otp(self, to_email: str, otp: str) -> None:
        """
        Send an OTP code to `to_email`.

        SMTP failures propagate to the caller; an unconfigured SMTP server
        only logs a warning.
        """
        if not self.enabled:
            logger.warning("SMTP not configured - skipping OTP email to %s", to_email)
            return

        message = MIMEText(f"<p>Your OTP code is <strong>{otp}</strong></p>", "html")
        message["Subject"] = "Your OTP Code"
        message["From"] = self.settings.smtp_from_email or self.settings.smtp_user
        message["To"] = to_email

        # Direct TLS on 465, STARTTLS otherwise
        use_tls = self.settings.smtp_port == 465
        await aiosmtplib.send(
            message,
            hostname=self.settings.smtp_host,
            port=self.settings.smtp_port,
            use_tls=use_tls,
            start_tls=not use_tls,
            username=self.settings.smtp_user,
            password=self.settings.smtp_password,
            timeout=30.0,
        )
        logger.info("OTP email sent to %s", to_email)


def get_email_service(settings: Settings = Depends(get_settings)) -> EmailService:
    return EmailService(settings)
