from unittest.mock import MagicMock, patch

from booking_api.core.config import Settings
from booking_api.services.notification_service import (
    EmailNotifier,
    SmtpConfig,
    build_notifier,
    smtp_config_from_settings,
)

SMTP = SmtpConfig(host="smtp.example.com", port=587, user="user", password="pass")

def make_notifier(smtp=SMTP):
    return EmailNotifier(
        smtp,
        from_email="noreply@enervalix.com",
        admin_email="admin@enervalix.com",
        site_url="https://enervalix.example",
    )

def sent_message(mock_server):
    args, _ = mock_server.sendmail.call_args
    return args

def test_smtp_config_needs_host_user_and_pass():
    base = dict(_env_file=None, SMTP_HOST="smtp.example.com", SMTP_USER="user", SMTP_PASS="pass")
    assert smtp_config_from_settings(Settings(**base)) == SmtpConfig("smtp.example.com", 587, "user", "pass")

    for missing in ("SMTP_HOST", "SMTP_USER", "SMTP_PASS"):
        assert smtp_config_from_settings(Settings(**{**base, missing: ""})) is None

def test_build_notifier_uses_settings():
    notifier = build_notifier(Settings(_env_file=None, PORT=4100, SITE_URL="", SMTP_HOST="", SMTP_USER="", SMTP_PASS=""))
    assert notifier.enabled is False
    assert notifier.site_url == "http://localhost:4100"

@patch("booking_api.services.notification_service.smtplib.SMTP")
def test_disabled_notifier_skips(mock_smtp_cls):
    notifier = make_notifier(smtp=None)

    assert notifier.send_confirmation("a@b.com", "Alice") is False
    assert notifier.send_admin_alert(1, {"name": "Alice", "email": "a@b.com"}) is False
    mock_smtp_cls.assert_not_called()

@patch("booking_api.services.notification_service.smtplib.SMTP")
def test_send_confirmation_mocked(mock_smtp_cls):
    mock_server = MagicMock()
    mock_smtp_cls.return_value = mock_server

    result = make_notifier().send_confirmation("alice@example.com", "Alice")

    assert result is True
    mock_smtp_cls.assert_called_once_with("smtp.example.com", 587)
    mock_server.starttls.assert_called_once()
    mock_server.login.assert_called_with("user", "pass")
    from_addr, to_addr, body = sent_message(mock_server)
    assert from_addr == "noreply@enervalix.com"
    assert to_addr == "alice@example.com"
    assert "Demo Booking Confirmation - Enervalix" in body
    mock_server.quit.assert_called_once()

@patch("booking_api.services.notification_service.smtplib.SMTP")
def test_send_admin_alert_mocked(mock_smtp_cls):
    mock_server = MagicMock()
    mock_smtp_cls.return_value = mock_server

    result = make_notifier().send_admin_alert(7, {"name": "Alice", "email": "a@b.com", "phone": None, "organization": ""})

    assert result is True
    _, to_addr, body = sent_message(mock_server)
    assert to_addr == "admin@enervalix.com"
    assert "New Demo Booking Request #7" in body

def test_admin_alert_renders_missing_fields_as_na():
    notifier = make_notifier()
    with patch.object(notifier, "_send") as mock_send:
        notifier.send_admin_alert(3, {"name": "Alice", "email": "a@b.com", "phone": None})

    to_addr, subject, html = mock_send.call_args[0]
    assert subject == "New Demo Booking Request #3"
    assert "<strong>Phone:</strong> N/A" in html
    assert "<strong>Organization:</strong> N/A" in html
    assert "<strong>Name:</strong> Alice" in html

def test_confirmation_links_features_page_and_escapes_name():
    notifier = make_notifier()
    with patch.object(notifier, "_send") as mock_send:
        notifier.send_confirmation("a@b.com", "<b>Alice</b>")

    to_addr, subject, html = mock_send.call_args[0]
    assert to_addr == "a@b.com"
    assert 'href="https://enervalix.example/features.html"' in html
    assert "&lt;b&gt;Alice&lt;/b&gt;" in html

@patch("booking_api.services.notification_service.smtplib.SMTP")
def test_send_failure_is_swallowed(mock_smtp_cls):
    mock_server = MagicMock()
    mock_server.login.side_effect = Exception("auth failed")
    mock_smtp_cls.return_value = mock_server

    notifier = make_notifier()
    assert notifier.send_confirmation("a@b.com", "Alice") is False
    assert notifier.send_admin_alert(1, {"name": "Alice", "email": "a@b.com"}) is False
    mock_server.quit.assert_called()

def test_admin_alert_without_admin_address_fails_quietly():
    notifier = EmailNotifier(SMTP, from_email="noreply@enervalix.com", admin_email="")
    with patch("booking_api.services.notification_service.smtplib.SMTP") as mock_smtp_cls:
        assert notifier.send_admin_alert(1, {"name": "Alice", "email": "a@b.com"}) is False
        mock_smtp_cls.assert_not_called()
