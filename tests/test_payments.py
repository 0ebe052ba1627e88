import asyncio
import hashlib
import hmac
import json
import re

import httpx
import pytest

from app.core.exceptions import AuthenticationError, DependencyError, ValidationError
from app.services.payment_service import (
    PaymentService,
    RazorpayClient,
    compute_signature,
    make_receipt_id,
    verify_signature,
)
from conftest import TEST_KEY_ID, TEST_KEY_SECRET


def sign(order_id, payment_id, secret=TEST_KEY_SECRET):
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


def test_compute_signature_matches_reference_hmac():
    assert compute_signature("secret", "order_1", "pay_1") == sign("order_1", "pay_1", "secret")
    assert compute_signature("secret", "order_1", "pay_1") == compute_signature("secret", "order_1", "pay_1")


def test_verify_signature_is_exact():
    good = sign("order_1", "pay_1", "secret")

    assert verify_signature("secret", "order_1", "pay_1", good)
    assert not verify_signature("secret", "order_1", "pay_1", good.upper())
    assert not verify_signature("secret", "order_1", "pay_1", good[:-1])
    assert not verify_signature("other", "order_1", "pay_1", good)
    assert not verify_signature("secret", "order_1", "pay_2", good)


def test_receipt_id_format():
    assert re.fullmatch(r"receipt_\d{13}", make_receipt_id())


def test_create_order_converts_to_paise(client, razorpay):
    response = client.post("/create-order", json={"amount": 100})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["order"]["id"] == "order_TEST123"
    assert data["order"]["amount"] == 10000

    assert len(razorpay.requests) == 1
    request = razorpay.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/orders"
    assert request.headers["authorization"].startswith("Basic ")

    body = json.loads(request.content)
    assert body["amount"] == 10000
    assert body["currency"] == "INR"
    assert re.fullmatch(r"receipt_\d+", body["receipt"])


@pytest.mark.parametrize("amount, expected", [("250", 25000), (10.5, 1050), (0.01, 1)])
def test_create_order_accepts_decimal_and_string_amounts(client, razorpay, amount, expected):
    response = client.post("/create-order", json={"amount": amount})

    assert response.status_code == 200
    assert json.loads(razorpay.requests[0].content)["amount"] == expected


@pytest.mark.parametrize("payload", [{}, {"amount": None}, {"amount": 0}, {"amount": -5}, {"amount": "abc"}, {"amount": ""}, {"amount": 0.001}, {"amount": 1e27}, {"amount": "1e999999999"}])
def test_create_order_rejects_invalid_amounts(client, razorpay, payload):
    response = client.post("/create-order", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid amount"
    assert razorpay.requests == []


def test_create_order_gateway_error(client, razorpay):
    razorpay.status_code = 401

    response = client.post("/create-order", json={"amount": 100})

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Order creation failed"
    assert data["code"] == "DEPENDENCY_ERROR"
    assert data["details"] == "Authentication failed"


def test_create_order_transport_error():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    gateway = RazorpayClient(TEST_KEY_ID, TEST_KEY_SECRET, transport=httpx.MockTransport(unreachable))
    service = PaymentService(gateway, TEST_KEY_SECRET)

    with pytest.raises(DependencyError):
        asyncio.run(service.create_order(100))


def test_create_order_without_credentials():
    gateway = RazorpayClient(None, None, transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    service = PaymentService(gateway, None)

    with pytest.raises(DependencyError):
        asyncio.run(service.create_order(100))


def test_verify_payment_success(client):
    payload = {
        "orderId": "order_9A33XWu170gUtm",
        "paymentId": "pay_29QQoUBi66xm2f",
        "signature": sign("order_9A33XWu170gUtm", "pay_29QQoUBi66xm2f"),
    }

    response = client.post("/verify-payment", json=payload)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Payment Verified!"}


def test_verify_payment_accepts_razorpay_checkout_names(client):
    payload = {
        "razorpay_order_id": "order_1",
        "razorpay_payment_id": "pay_1",
        "razorpay_signature": sign("order_1", "pay_1"),
    }

    response = client.post("/verify-payment", json=payload)

    assert response.status_code == 200


def test_verify_payment_mismatch(client):
    payload = {"orderId": "order_1", "paymentId": "pay_1", "signature": sign("order_1", "pay_2")}

    response = client.post("/verify-payment", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid signature!"
    assert response.json()["code"] == "AUTHENTICATION_FAILED"


@pytest.mark.parametrize("missing", ["orderId", "paymentId", "signature"])
def test_verify_payment_requires_all_fields(client, missing):
    payload = {"orderId": "order_1", "paymentId": "pay_1", "signature": sign("order_1", "pay_1")}
    del payload[missing]

    response = client.post("/verify-payment", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Missing fields"


def test_verify_payment_never_touches_storage(client, users_collection):
    client.post("/verify-payment", json={"orderId": "o", "paymentId": "p", "signature": sign("o", "p")})
    client.post("/verify-payment", json={"orderId": "o", "paymentId": "p", "signature": "bad"})

    assert users_collection.documents == []


def test_verify_payment_without_secret_rejects_everything(payment_service):
    service = PaymentService(payment_service.gateway, secret=None)
    empty_key_signature = hmac.new(b"", b"o|p", hashlib.sha256).hexdigest()

    with pytest.raises(AuthenticationError):
        service.verify_payment("o", "p", empty_key_signature)


def test_verify_payment_missing_fields_raise_validation_error(payment_service):
    with pytest.raises(ValidationError) as exc_info:
        payment_service.verify_payment("order_1", "", None)
    assert exc_info.value.details == {"missing": ["paymentId", "signature"]}
