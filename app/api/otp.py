"""
app/api/otp.py

Purpose: Email OTP endpoints

- POST /send-otp: create user if needed, store and mail a new code
- POST /verify-otp: check a code and mark the user verified
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_otp_service
from app.schemas.otp import SendOTPRequest, VerifyOTPRequest
from app.schemas.response import MessageResponse, UserResponse
from app.services.otp_service import OTPService
from utils.constants import MSG_OTP_SENT, MSG_USER_VERIFIED

router = APIRouter()


@router.post("/send-otp", response_model=MessageResponse)
async def send_otp(payload: SendOTPRequest, otp_service: OTPService = Depends(get_otp_service)):
    """
    Issues a 6-digit OTP and emails it.

    400 when name or email is missing, 500 when the code could not be stored
    or the email could not be sent.
    """
    await otp_service.issue_otp(name=payload.name, email=payload.email, phone=payload.phone)
    return MessageResponse(message=MSG_OTP_SENT)


@router.post("/verify-otp", response_model=UserResponse)
async def verify_otp(payload: VerifyOTPRequest, otp_service: OTPService = Depends(get_otp_service)):
    """
    Verifies an OTP. On success the user is marked verified and the code is cleared.
    """
    user = await otp_service.verify_otp(email=payload.email, otp=payload.otp)
    return UserResponse(message=MSG_USER_VERIFIED, user=user.to_public())
