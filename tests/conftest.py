import copy
import json
import os
import sys
from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ["ENVIRONMENT"] = "development"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app.api import deps  # noqa: E402
from app.core.exceptions import DependencyError  # noqa: E402
from app.main import app  # noqa: E402
from app.services.payment_service import PaymentService, RazorpayClient  # noqa: E402
from app.services.user_service import UserService  # noqa: E402

TEST_KEY_ID = "rzp_test_key"
TEST_KEY_SECRET = "rzp_test_secret"


class FakeUsersCollection:
    """
    In-memory stand-in for the Motor users collection.
    Supports only the equality filters and $set updates the services issue.
    """

    def __init__(self):
        self.documents = []

    @staticmethod
    def _matches(document, query):
        return all(document.get(key) == value for key, value in query.items())

    async def find_one(self, query):
        for document in self.documents:
            if self._matches(document, query):
                return copy.deepcopy(document)
        return None

    async def insert_one(self, document):
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        for document in self.documents:
            if self._matches(document, query):
                before = copy.deepcopy(document)
                document.update(copy.deepcopy(update.get("$set", {})))
                if return_document == ReturnDocument.AFTER:
                    return copy.deepcopy(document)
                return before
        return None

    async def count_documents(self, query):
        return sum(1 for document in self.documents if self._matches(document, query))


class StubMailer:
    """Records outgoing mail instead of talking to SMTP."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to_email, subject, body):
        if self.fail:
            raise DependencyError("Mail send failed", details="SMTP connection refused")
        self.sent.append({"to": to_email, "subject": subject, "body": body})


class RazorpayStub:
    """httpx MockTransport handler imitating POST /v1/orders."""

    def __init__(self):
        self.requests = []
        self.status_code = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(
                self.status_code,
                json={"error": {"code": "BAD_REQUEST_ERROR", "description": "Authentication failed"}},
            )
        data = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "id": "order_TEST123",
                "entity": "order",
                "amount": data["amount"],
                "currency": data["currency"],
                "receipt": data["receipt"],
                "status": "created",
            },
        )


@pytest.fixture()
def users_collection():
    return FakeUsersCollection()


@pytest.fixture()
def user_service(users_collection):
    return UserService(users_collection)


@pytest.fixture()
def mailer():
    return StubMailer()


@pytest.fixture()
def razorpay():
    return RazorpayStub()


@pytest.fixture()
def payment_service(razorpay):
    gateway = RazorpayClient(
        key_id=TEST_KEY_ID,
        key_secret=TEST_KEY_SECRET,
        base_url="https://api.razorpay.test",
        transport=httpx.MockTransport(razorpay),
    )
    return PaymentService(gateway=gateway, secret=TEST_KEY_SECRET, currency="INR")


@pytest.fixture()
def client(user_service, mailer, payment_service):
    """TestClient with the store, mailer and gateway replaced; lifespan is not run."""
    app.dependency_overrides[deps.get_user_service] = lambda: user_service
    app.dependency_overrides[deps.get_mail_service] = lambda: mailer
    app.dependency_overrides[deps.get_payment_service] = lambda: payment_service

    yield TestClient(app)

    app.dependency_overrides.clear()
