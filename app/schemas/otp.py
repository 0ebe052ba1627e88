"""
app/schemas/otp.py

Purpose: OTP request payloads

Fields are optional at the schema level; the OTP service reports missing
values as a 400 "Missing fields" error.
"""

from pydantic import BaseModel, Field
from typing import Optional


class SendOTPRequest(BaseModel):
    name: Optional[str] = Field(default=None, description="User's display name")
    email: Optional[str] = Field(default=None, description="Address the OTP is mailed to")
    phone: Optional[str] = Field(default=None, description="Phone number, stored on first request")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Asha",
                "email": "asha@example.com",
                "phone": "+919876543210"
            }
        }


class VerifyOTPRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = Field(default=None, description="6-digit code, as a string")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "asha@example.com",
                "otp": "482913"
            }
        }
