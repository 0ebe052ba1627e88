"""
app/api/payments.py

Purpose: Razorpay checkout endpoints

- POST /create-order: create a gateway order for an amount in rupees
- POST /verify-payment: check the signature returned by checkout
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_payment_service
from app.schemas.payment import CreateOrderRequest, VerifyPaymentRequest
from app.schemas.response import MessageResponse, OrderResponse
from app.services.payment_service import PaymentService
from utils.constants import MSG_ORDER_CREATED, MSG_PAYMENT_VERIFIED

router = APIRouter()


@router.post("/create-order", response_model=OrderResponse)
async def create_order(payload: CreateOrderRequest, payments: PaymentService = Depends(get_payment_service)):
    """
    Creates a Razorpay order. The gateway's order object is returned unchanged.
    """
    order = await payments.create_order(payload.amount)
    return OrderResponse(message=MSG_ORDER_CREATED, order=order)


@router.post("/verify-payment", response_model=MessageResponse)
async def verify_payment(payload: VerifyPaymentRequest, payments: PaymentService = Depends(get_payment_service)):
    payments.verify_payment(payload.order_id, payload.payment_id, payload.signature)
    return MessageResponse(message=MSG_PAYMENT_VERIFIED)
