from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from src.patrons_checkin.patrons_checkin.newsletter import mailer as mailer_module
from src.patrons_checkin.patrons_checkin.newsletter.captcha import RecaptchaVerifier
from src.patrons_checkin.patrons_checkin.newsletter.mailer import SmtpMailer


def _verifier(body, status=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(parse_qs(request.content.decode()))
        return httpx.Response(status, json=body)

    return RecaptchaVerifier("shh", threshold=0.5, transport=httpx.MockTransport(handler))


def test_recaptcha_posts_secret_and_token():
    seen = []

    assert _verifier({"success": True, "score": 0.9}, seen=seen).verify("tok")
    assert seen == [{"secret": ["shh"], "response": ["tok"]}]


@pytest.mark.parametrize(
    "body",
    [
        {"success": True, "score": 0.5},
        {"success": True, "score": 0.1},
        {"success": False, "score": 0.9},
        {"success": False, "error-codes": ["invalid-input-response"]},
    ],
)
def test_recaptcha_rejects_low_scores_and_failures(body):
    assert not _verifier(body).verify("tok")


def test_recaptcha_http_errors_propagate():
    with pytest.raises(httpx.HTTPStatusError):
        _verifier({}, status=503).verify("tok")


class RecordingSMTP:
    instances = []

    def __init__(self, host, port):
        self.host, self.port = host, port
        self.calls = []
        RecordingSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def sendmail(self, sender, recipients, message):
        self.calls.append(("sendmail", sender, recipients, message))


def test_smtp_mailer_sends_through_relay(monkeypatch):
    RecordingSMTP.instances = []
    monkeypatch.setattr(mailer_module.smtplib, "SMTP", RecordingSMTP)
    mailer = SmtpMailer("smtp.test", 2525, username="u", password="p", sender="news@test")

    assert mailer.send("fan@example.com", "Hello", "plain body", "<p>html body</p>")

    (smtp,) = RecordingSMTP.instances
    assert (smtp.host, smtp.port) == ("smtp.test", 2525)
    assert smtp.calls[:2] == ["starttls", ("login", "u", "p")]
    _, sender, recipients, message = smtp.calls[2]
    assert sender == "news@test"
    assert recipients == ["fan@example.com"]
    assert "Subject: Hello" in message


def test_smtp_mailer_without_host_only_logs(monkeypatch):
    RecordingSMTP.instances = []
    monkeypatch.setattr(mailer_module.smtplib, "SMTP", RecordingSMTP)

    assert not SmtpMailer().send("fan@example.com", "Hello", "plain body")
    assert RecordingSMTP.instances == []
