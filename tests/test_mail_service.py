import asyncio
import smtplib

import pytest

from app.core.exceptions import DependencyError
from app.services import mail_service
from app.services.mail_service import MailService
from app.services.otp_service import OTPService


class FakeSMTP:
    instances = []
    fail_login = False

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.calls = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.calls.append("quit")
        return False

    def ehlo(self):
        self.calls.append("ehlo")

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        if FakeSMTP.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"Username and Password not accepted")
        self.calls.append(("login", user, password))

    def send_message(self, msg):
        self.messages.append(msg)


@pytest.fixture()
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_login = False
    monkeypatch.setattr(mail_service.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def make_mailer(**overrides):
    options = dict(
        host="smtp.gmail.com",
        port=587,
        username="noreply@cosco.test",
        password="abcd efgh ijkl mnop",
        from_name="COSCO Shipping",
    )
    options.update(overrides)
    return MailService(**options)


def test_send_builds_and_delivers_message(fake_smtp):
    asyncio.run(make_mailer().send("a@x.com", "Your COSCO OTP Code", "Hello A, your OTP is 123456."))

    server = fake_smtp.instances[0]
    assert (server.host, server.port, server.timeout) == ("smtp.gmail.com", 587, 10.0)
    assert "starttls" in server.calls
    assert ("login", "noreply@cosco.test", "abcdefghijklmnop") in server.calls

    msg = server.messages[0]
    assert msg["To"] == "a@x.com"
    assert msg["From"] == "COSCO Shipping <noreply@cosco.test>"
    assert msg["Subject"] == "Your COSCO OTP Code"
    assert "123456" in msg.get_content()


def test_send_without_tls(fake_smtp):
    asyncio.run(make_mailer(use_tls=False).send("a@x.com", "s", "b"))

    assert "starttls" not in fake_smtp.instances[0].calls


def test_smtp_failure_raises_dependency_error(fake_smtp):
    fake_smtp.fail_login = True

    with pytest.raises(DependencyError) as exc_info:
        asyncio.run(make_mailer().send("a@x.com", "s", "b"))

    assert "Username and Password" in exc_info.value.details


def test_unconfigured_mailer_refuses_to_send(fake_smtp):
    mailer = make_mailer(username=None, password=None)

    assert not mailer.is_configured()
    with pytest.raises(DependencyError):
        asyncio.run(mailer.send("a@x.com", "s", "b"))
    assert fake_smtp.instances == []


def test_recipient_with_line_break_is_refused_before_connecting(fake_smtp):
    with pytest.raises(DependencyError) as exc_info:
        asyncio.run(make_mailer().send("a@x.com\r\nBcc: victim@y.com", "s", "b"))

    assert exc_info.value.message == "Mail send failed"
    assert fake_smtp.instances == []


def test_issue_otp_to_header_injection_address_is_a_send_failure(fake_smtp, user_service):
    service = OTPService(user_service, make_mailer())

    with pytest.raises(DependencyError) as exc_info:
        asyncio.run(service.issue_otp(name="A", email="a@x.com\nBcc: victim@y.com"))

    assert exc_info.value.message == "Failed to send OTP email"
