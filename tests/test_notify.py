from __future__ import annotations

import smtplib
from types import SimpleNamespace

from guest_desk.notify.mailer import SmtpMailer
from guest_desk.notify.messenger import TwilioMessenger, format_whatsapp_number
from guest_desk.notify.notifier import Notifier


class FakeMessages:
    def __init__(self, error: Exception | None = None):
        self.calls: list[dict] = []
        self.error = error

    def create(self, **params):
        self.calls.append(params)
        if self.error:
            raise self.error
        return SimpleNamespace(sid="SM123", status="queued")


class FakeTwilioClient:
    def __init__(self, error: Exception | None = None):
        self.messages = FakeMessages(error)


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout
        self.sent: list[tuple] = []
        self.logged_in = None
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = (user, password)

    def sendmail(self, from_addr, to_addrs, msg):
        self.sent.append((from_addr, to_addrs, msg))


class RefusingSMTP(FakeSMTP):
    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


def test_format_whatsapp_number():
    assert format_whatsapp_number("whatsapp:+14155238886") == "whatsapp:+14155238886"
    assert format_whatsapp_number("+919876543210") == "whatsapp:+919876543210"
    assert format_whatsapp_number("91 98765-43210") == "whatsapp:+919876543210"


def test_messenger_sends_through_twilio():
    client = FakeTwilioClient()
    messenger = TwilioMessenger("AC1", "token", "+14155238886", client=client)

    assert messenger.send_message("whatsapp:+919876543210", "Hello") is True
    assert client.messages.calls == [
        {"from_": "whatsapp:+14155238886", "to": "whatsapp:+919876543210", "body": "Hello"}
    ]


def test_messenger_swallows_provider_errors():
    client = FakeTwilioClient(error=RuntimeError("unreachable"))
    messenger = TwilioMessenger("AC1", "token", "+14155238886", client=client)

    assert messenger.send_message("+919876543210", "Hello") is False


def test_messenger_without_configuration_does_not_send():
    messenger = TwilioMessenger(None, None, None)
    assert messenger.is_configured() is False
    assert messenger.send_message("+919876543210", "Hello") is False


def test_mailer_sends_plain_text():
    FakeSMTP.instances.clear()
    mailer = SmtpMailer("desk@example.com", "pw", ["manager@example.com", "ops@example.com"], smtp_factory=FakeSMTP)

    assert mailer.send_email("Guest Complaint", "AC is noisy") is True
    (smtp,) = FakeSMTP.instances
    assert (smtp.host, smtp.port) == ("smtp.gmail.com", 587)
    assert smtp.logged_in == ("desk@example.com", "pw")
    from_addr, to_addrs, raw = smtp.sent[0]
    assert from_addr == "desk@example.com"
    assert to_addrs == ["manager@example.com", "ops@example.com"]
    assert "Subject: Guest Complaint" in raw


def test_mailer_logs_and_returns_false_on_failure():
    mailer = SmtpMailer("desk@example.com", "wrong", ["manager@example.com"], smtp_factory=RefusingSMTP)
    assert mailer.send_email("Guest Complaint", "AC is noisy") is False


def test_mailer_unconfigured():
    assert SmtpMailer(None, None, []).send_email("x", "y") is False


def test_notifier_routes_manager_alerts():
    client = FakeTwilioClient()
    notifier = Notifier(
        messenger=TwilioMessenger("AC1", "token", "+14155238886", client=client),
        mailer=SmtpMailer(None, None, []),
        manager_number="+919000000000",
    )

    assert notifier.alert_manager("Housekeeping Request:\nRoom: 101") is True
    assert client.messages.calls[0]["to"] == "whatsapp:+919000000000"


def test_notifier_without_manager_number_drops_alert():
    client = FakeTwilioClient()
    notifier = Notifier(
        messenger=TwilioMessenger("AC1", "token", "+14155238886", client=client),
        mailer=SmtpMailer(None, None, []),
    )

    assert notifier.alert_manager("Room: 101") is False
    assert client.messages.calls == []
