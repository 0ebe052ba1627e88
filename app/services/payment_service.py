"""
app/services/payment_service.py

Purpose: Razorpay order / signature handshake

- Creates orders through the Razorpay Orders API
- Verifies checkout signatures (HMAC-SHA256 over "order_id|payment_id")
- Nothing is persisted; verification is a pure function of its inputs
"""

import hashlib
import hmac
from decimal import DecimalException
from typing import Any, Dict, Optional

import httpx

from app.core.exceptions import AuthenticationError, DependencyError, ValidationError
from app.core.logging import get_logger, LogContext
from utils.constants import (
    MINOR_UNITS_PER_MAJOR,
    MSG_INVALID_AMOUNT,
    MSG_INVALID_SIGNATURE,
    MSG_MISSING_FIELDS,
    MSG_ORDER_FAILED,
    RECEIPT_PREFIX,
    SIGNATURE_SEPARATOR,
)
from utils.time_utils import epoch_millis
from utils.validation_utils import missing_fields, parse_amount, to_minor_units

logger = get_logger(__name__)


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    """
    Hex HMAC-SHA256 of "order_id|payment_id" keyed with the gateway secret.
    """
    payload = f"{order_id}{SIGNATURE_SEPARATOR}{payment_id}"
    return hmac.new(
        secret.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256
    ).hexdigest()


def verify_signature(secret: str, order_id: str, payment_id: str, signature: str) -> bool:
    """
    True iff signature equals the expected HMAC exactly (constant-time compare).
    """
    expected = compute_signature(secret, order_id, payment_id)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


def make_receipt_id() -> str:
    """
    Receipt ids are only as unique as the millisecond clock.
    """
    return f"{RECEIPT_PREFIX}{epoch_millis()}"


class RazorpayClient:
    """Minimal Razorpay REST client (Orders API only)"""

    def __init__(
        self,
        key_id: Optional[str],
        key_secret: Optional[str],
        base_url: str = "https://api.razorpay.com",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def is_configured(self) -> bool:
        """Check if Razorpay credentials are present"""
        return bool(self.key_id and self.key_secret)

    async def create_order(self, amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        """
        Creates an order.

        Args:
            amount: Amount in minor units (paise)
            currency: ISO currency code
            receipt: Merchant receipt id

        Returns:
            Razorpay order object, as returned by the API

        Raises:
            DependencyError: On missing credentials, transport errors or non-2xx replies
        """
        if not self.is_configured():
            logger.error("Razorpay credentials are not configured")
            raise DependencyError(MSG_ORDER_FAILED, details="Razorpay credentials are not configured")

        body = {"amount": amount, "currency": currency, "receipt": receipt}

        logger.info(f"💳 Creating Razorpay order: {amount} {currency} ({receipt})")

        try:
            response = await self._client.post(
                "/v1/orders",
                json=body,
                auth=(self.key_id, self.key_secret),
            )
        except httpx.TimeoutException as e:
            logger.error("Razorpay API timeout")
            raise DependencyError(MSG_ORDER_FAILED, details="Razorpay API timeout") from e
        except httpx.HTTPError as e:
            logger.error(f"Network error calling Razorpay: {e}")
            raise DependencyError(MSG_ORDER_FAILED, details=str(e)) from e

        if response.status_code not in (200, 201):
            logger.error(f"❌ Razorpay API error: {response.status_code} - {response.text}")
            raise DependencyError(
                MSG_ORDER_FAILED,
                details=_gateway_error_description(response),
            )

        order = response.json()
        logger.info(f"✅ Razorpay order created: {order.get('id')}")
        return order

    async def close(self):
        await self._client.aclose()


def _gateway_error_description(response: httpx.Response) -> str:
    try:
        error = response.json().get("error", {})
        description = error.get("description")
    except (ValueError, AttributeError):
        description = None
    return description or f"Razorpay API error: {response.status_code}"


class PaymentService:
    """
    Order creation and signature verification for the checkout flow.
    """

    def __init__(self, gateway: RazorpayClient, secret: Optional[str], currency: str = "INR"):
        self.gateway = gateway
        self.secret = secret
        self.currency = currency

    async def create_order(self, amount: Any) -> Dict[str, Any]:
        """
        Creates a gateway order for a major-unit amount (e.g. rupees).

        Raises:
            ValidationError: If amount is missing, not numeric or not positive
            DependencyError: If the gateway call fails
        """
        parsed = parse_amount(amount)
        if parsed is None or parsed <= 0:
            raise ValidationError(MSG_INVALID_AMOUNT)

        try:
            minor_amount = to_minor_units(parsed, MINOR_UNITS_PER_MAJOR)
        except DecimalException as e:
            raise ValidationError(MSG_INVALID_AMOUNT) from e

        if minor_amount <= 0:
            raise ValidationError(MSG_INVALID_AMOUNT)

        return await self.gateway.create_order(
            amount=minor_amount,
            currency=self.currency,
            receipt=make_receipt_id(),
        )

    def verify_payment(self, order_id: Optional[str], payment_id: Optional[str], signature: Optional[str]) -> bool:
        """
        Checks a checkout signature. Never touches storage.

        Raises:
            ValidationError: If any field is missing
            AuthenticationError: If the signature does not match
        """
        missing = missing_fields(orderId=order_id, paymentId=payment_id, signature=signature)
        if missing:
            raise ValidationError(MSG_MISSING_FIELDS, details={"missing": missing})

        with LogContext(order_id=order_id):
            if not self.secret:
                logger.error("RAZORPAY_KEY_SECRET is not configured; rejecting payment")
                raise AuthenticationError(MSG_INVALID_SIGNATURE)

            if not verify_signature(self.secret, order_id, payment_id, signature):
                logger.warning("Payment signature mismatch")
                raise AuthenticationError(MSG_INVALID_SIGNATURE)

            logger.info("Payment signature verified")
            return True
