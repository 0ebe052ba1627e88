"""
app/services/mail_service.py

Purpose: Outgoing email over SMTP

- Sends plain-text mail (OTP codes)
- Runs the blocking smtplib session in a worker thread
- Raises DependencyError on any transport failure
"""

import asyncio
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from app.core.exceptions import DependencyError
from app.core.logging import get_logger

logger = get_logger(__name__)


class MailService:
    """SMTP mail sender (Gmail app password by default)"""

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        from_name: str,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        # Gmail shows app passwords in groups of four
        self.password = (password or "").replace(" ", "")
        self.from_name = from_name
        self.use_tls = use_tls
        self.timeout = timeout

    @property
    def sender(self) -> str:
        return formataddr((self.from_name, self.username or ""))

    def is_configured(self) -> bool:
        """Check if SMTP credentials are present"""
        return bool(self.host and self.username and self.password)

    def _build_message(self, to_email: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to_email
        msg.set_content(body)
        return msg

    def _send_blocking(self, msg: EmailMessage):
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.ehlo()
            if self.use_tls:
                server.starttls()
                server.ehlo()
            server.login(self.username, self.password)
            server.send_message(msg)

    async def send(self, to_email: str, subject: str, body: str):
        """
        Sends a plain-text email.

        Args:
            to_email: Recipient address
            subject: Subject line
            body: Plain-text body

        Raises:
            DependencyError: If SMTP is not configured or the send fails
        """
        if not self.is_configured():
            logger.error("SMTP is not configured; cannot send mail")
            raise DependencyError("Mail transport is not configured")

        logger.info(f"📤 Sending mail to {to_email} via {self.host}:{self.port}")

        try:
            msg = self._build_message(to_email, subject, body)
            await asyncio.to_thread(self._send_blocking, msg)
        except ValueError as e:
            # header values with CR/LF are refused by the email package
            logger.error(f"❌ Could not build mail for {to_email!r}: {e}")
            raise DependencyError("Mail send failed", details=str(e)) from e
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ SMTP send to {to_email} failed: {e}")
            raise DependencyError("Mail send failed", details=str(e)) from e

        logger.info(f"✅ Mail sent to {to_email}")
