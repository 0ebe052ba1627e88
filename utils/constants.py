"""
utils/constants.py

Purpose: Centralized static content

- All user-facing API messages
- OTP and payment constants

(Prevents hardcoding across the codebase)
"""

# ============================================================
# OTP
# ============================================================

OTP_MIN = 100000
OTP_MAX = 999999

OTP_EMAIL_SUBJECT = "Your COSCO OTP Code"
OTP_EMAIL_BODY = "Hello {name}, your OTP is {otp}."

# ============================================================
# PAYMENTS
# ============================================================

# Gateway amounts are in minor units (paise for INR)
MINOR_UNITS_PER_MAJOR = 100
RECEIPT_PREFIX = "receipt_"
SIGNATURE_SEPARATOR = "|"

# ============================================================
# API MESSAGES
# ============================================================

MSG_BACKEND_ACTIVE = "🚀 COSCO Backend Active"
MSG_MISSING_FIELDS = "Missing fields"

MSG_OTP_SENT = "OTP sent successfully!"
MSG_OTP_SEND_FAILED = "Failed to send OTP email"
MSG_INVALID_OTP = "Invalid OTP"
MSG_USER_VERIFIED = "User verified"

MSG_INVALID_AMOUNT = "Invalid amount"
MSG_ORDER_CREATED = "Order created"
MSG_ORDER_FAILED = "Order creation failed"
MSG_PAYMENT_VERIFIED = "Payment Verified!"
MSG_INVALID_SIGNATURE = "Invalid signature!"

MSG_USER_FOUND = "User found"
MSG_USER_NOT_FOUND = "User not found"
