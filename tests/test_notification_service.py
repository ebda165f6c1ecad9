import smtplib

import pytest

from storefront.core.errors import NotificationError
from storefront.services.notification_service import NotificationService


def test_notify_sends_html_and_text():
    sent = []
    service = NotificationService(sender=lambda **kw: sent.append(kw))

    service.notify("a@example.com", "Hi", "<p>Hello <b>there</b></p>")

    assert sent == [
        {
            "to_email": "a@example.com",
            "subject": "Hi",
            "text_body": "Hello there",
            "html_body": "<p>Hello <b>there</b></p>",
        }
    ]


def test_notify_wraps_transport_errors():
    def sender(**kwargs):
        raise smtplib.SMTPServerDisconnected("gone")

    with pytest.raises(NotificationError):
        NotificationService(sender=sender).notify("a@example.com", "Hi", "<p>x</p>")


def test_password_reset_mail_failure_is_logged(caplog):
    def sender(**kwargs):
        raise ConnectionRefusedError("smtp down")

    ok = NotificationService(sender=sender).send_password_reset(
        "a@example.com", "http://localhost:3000/reset/abc"
    )

    assert ok is False
    assert "Notification failed" in caplog.text


def test_password_reset_mail_contains_link():
    sent = []
    service = NotificationService(sender=lambda **kw: sent.append(kw))

    assert service.send_password_reset("a@example.com", "http://shop/reset/abc") is True
    assert 'href="http://shop/reset/abc"' in sent[0]["html_body"]
