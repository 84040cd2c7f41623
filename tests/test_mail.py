import smtplib

import pytest

from mailer import generate_otp, mail
from models import EmailOtp


@pytest.fixture
def otps(monkeypatch):
    codes = iter(["111111", "222222", "333333"])
    monkeypatch.setattr("mailer.generate_otp", lambda length=6: next(codes))


def test_generate_otp():
    otp = generate_otp(6)
    assert len(otp) == 6
    assert otp.isdigit()


def test_submit_email_sends_otp(client, otps):
    with mail.record_messages() as outbox:
        resp = client.post("/api/email", json={"email": "a@example.com"})

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "OTP sent to your email for verification"}
    assert len(outbox) == 1
    assert outbox[0].recipients == ["a@example.com"]
    assert outbox[0].subject == "OTP for Email Verification"
    assert outbox[0].body == "Your OTP for email verification is: 111111"


def test_resubmission_overwrites_otp(client, app, otps):
    client.post("/api/email", json={"email": "a@example.com"})
    client.post("/api/email", json={"email": "a@example.com"})

    with app.app_context():
        assert EmailOtp.query.count() == 1

    stale = client.post("/api/verify-otp", json={"email": "a@example.com", "otp": "111111"})
    assert stale.status_code == 400
    assert stale.get_json() == {"success": False, "message": "Invalid OTP"}

    fresh = client.post("/api/verify-otp", json={"email": "a@example.com", "otp": "222222"})
    assert fresh.status_code == 200
    assert fresh.get_json()["success"] is True


def test_verify_unknown_email(client):
    resp = client.post("/api/verify-otp", json={"email": "nobody@example.com", "otp": "123456"})
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Email not found"


def test_email_count(client, otps):
    client.post("/api/email", json={"email": "a@example.com"})
    client.post("/api/email", json={"email": "b@example.com"})
    client.post("/api/email", json={"email": "a@example.com"})
    assert client.get("/api/email-count").get_json() == {"success": True, "count": 2}


def test_submit_email_requires_address(client):
    assert client.post("/api/email", json={}).status_code == 400


def test_send_email_relay(client):
    with mail.record_messages() as outbox:
        resp = client.post("/api/send-email", json={"to": "b@example.com", "subject": "Hi", "body": "Hello"})

    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Email sent successfully"
    assert outbox[0].recipients == ["b@example.com"]
    assert outbox[0].body == "Hello"


def test_send_email_transport_failure(client, monkeypatch):
    def refuse(message):
        raise smtplib.SMTPServerDisconnected("gone")

    monkeypatch.setattr(mail, "send", refuse)
    resp = client.post("/api/send-email", json={"to": "b@example.com", "subject": "Hi", "body": "Hello"})
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Failed to send email"


def test_send_email_requires_recipient(client):
    assert client.post("/api/send-email", json={"subject": "Hi"}).status_code == 400
