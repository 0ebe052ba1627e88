"""
app/services/otp_service.py

Purpose: Email OTP issue / verify

- Generates 6-digit codes
- Creates the user on first request, otherwise replaces the stored code
- Emails the code
- Verifies submitted codes and marks the user verified

OTPs have no expiry and no attempt limit; a new code simply replaces the old one.
"""

import hmac
import secrets
from typing import Optional

from app.core.exceptions import AuthenticationError, DependencyError, ValidationError
from app.core.logging import get_logger, LogContext
from app.models.user import User
from app.services.mail_service import MailService
from app.services.user_service import UserService
from utils.constants import (
    MSG_INVALID_OTP,
    MSG_MISSING_FIELDS,
    MSG_OTP_SEND_FAILED,
    OTP_EMAIL_BODY,
    OTP_EMAIL_SUBJECT,
    OTP_MAX,
    OTP_MIN,
)
from utils.validation_utils import missing_fields

logger = get_logger(__name__)


def generate_otp() -> str:
    """
    Uniform random code in [100000, 999999], as a string.
    """
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def otp_matches(stored: Optional[str], submitted: str) -> bool:
    """
    Exact string comparison; "012345" never matches "12345".
    """
    if stored is None:
        return False
    return hmac.compare_digest(stored.encode("utf-8"), submitted.encode("utf-8"))


class OTPService:
    def __init__(self, users: UserService, mailer: MailService):
        self.users = users
        self.mailer = mailer

    async def issue_otp(self, name: Optional[str], email: Optional[str], phone: Optional[str] = None) -> User:
        """
        Issues a fresh OTP for an email address and mails it.

        The code is persisted before the mail goes out, so a mail failure
        still leaves the new code as the outstanding one.

        Args:
            name: Display name (required)
            email: Email address (required)
            phone: Optional phone number, stored only when the user is created

        Returns:
            The stored user

        Raises:
            ValidationError: If name or email is missing
            PersistenceError: If the user could not be stored
            DependencyError: If the email could not be sent
        """
        missing = missing_fields(name=name, email=email)
        if missing:
            raise ValidationError(MSG_MISSING_FIELDS, details={"missing": missing})

        with LogContext(email=email):
            otp = generate_otp()

            user = await self.users.get_user_by_email(email)
            if user is None:
                user = await self.users.create_user(name=name, email=email, phone=phone, otp=otp)
            else:
                user = await self.users.set_otp(user, otp)

            logger.info("OTP stored, sending email")

            try:
                await self.mailer.send(
                    to_email=email,
                    subject=OTP_EMAIL_SUBJECT,
                    body=OTP_EMAIL_BODY.format(name=name, otp=otp),
                )
            except DependencyError as e:
                raise DependencyError(MSG_OTP_SEND_FAILED, details=e.details) from e

            return user

    async def verify_otp(self, email: Optional[str], otp: Optional[str]) -> User:
        """
        Verifies a submitted code.

        Unknown email and wrong code fail identically.

        Returns:
            The updated user (verified, otp cleared)

        Raises:
            ValidationError: If email or otp is missing
            AuthenticationError: If the code does not match
            PersistenceError: If the store fails
        """
        missing = missing_fields(email=email, otp=otp)
        if missing:
            raise ValidationError(MSG_MISSING_FIELDS, details={"missing": missing})

        with LogContext(email=email):
            user = await self.users.get_user_by_email(email)

            if user is None or not otp_matches(user.otp, otp):
                logger.info("OTP rejected")
                raise AuthenticationError(MSG_INVALID_OTP)

            verified = await self.users.mark_verified(user, otp)
            if verified is None:
                raise AuthenticationError(MSG_INVALID_OTP)

            return verified
