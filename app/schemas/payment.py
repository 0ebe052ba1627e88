"""
app/schemas/payment.py

Purpose: Payment request payloads

- create-order amount (validated by the payment service)
- verify-payment triple; accepts both camelCase and Razorpay checkout names
"""

from pydantic import BaseModel, Field, AliasChoices
from typing import Any, Optional


class CreateOrderRequest(BaseModel):
    amount: Optional[Any] = Field(default=None, description="Amount in rupees")

    class Config:
        json_schema_extra = {
            "example": {"amount": 499}
        }


class VerifyPaymentRequest(BaseModel):
    order_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("orderId", "razorpay_order_id"),
    )
    payment_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("paymentId", "razorpay_payment_id"),
    )
    signature: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("signature", "razorpay_signature"),
    )

    class Config:
        json_schema_extra = {
            "example": {
                "orderId": "order_9A33XWu170gUtm",
                "paymentId": "pay_29QQoUBi66xm2f",
                "signature": "9ef4dffbfd84f1318f6739a3ce19f9d85851857ae648f114332d8401e0949a3d"
            }
        }
