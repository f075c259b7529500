"""
Tests for sender normalization and outbound WhatsApp delivery
"""

import json

import httpx
import pytest

from genium.config import get_settings
from genium.services import WhatsAppSender, normalize_sender


class TestNormalizeSender:
    """Tests for normalize_sender"""

    @pytest.mark.parametrize("sender,expected", [
        ("1234567890@s.whatsapp.net", "+1234567890"),
        ("1234567890@c.us", "+1234567890"),
        ("+1234567890", "+1234567890"),
        ("1234567890", "+1234567890"),
        ("", ""),
        ("@s.whatsapp.net", ""),
    ])
    def test_normalize(self, sender, expected):
        assert normalize_sender(sender) == expected


@pytest.fixture
def configured(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "WHATSAPP_API_URL", "https://gateway.example.com/")
    monkeypatch.setattr(settings, "WHATSAPP_API_KEY", "secret")
    return settings


class TestSendText:
    """Tests for WhatsAppSender.send_text"""

    def test_posts_message(self, configured):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"status": "sent"})

        sender = WhatsAppSender(client=httpx.Client(transport=httpx.MockTransport(handler)))

        assert sender.send_text("+1234567890", "The cheapest 2-bedroom unit is $298,000.") is True

        request = requests[0]
        assert str(request.url) == "https://gateway.example.com/messages"
        assert request.headers["apikey"] == "secret"
        assert json.loads(request.content) == {
            "number": "1234567890",
            "text": "The cheapest 2-bedroom unit is $298,000.",
        }

    def test_gateway_error(self, configured):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        sender = WhatsAppSender(client=httpx.Client(transport=transport))

        assert sender.send_text("+1234567890", "hello") is False

    def test_connection_error(self, configured):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        sender = WhatsAppSender(client=httpx.Client(transport=httpx.MockTransport(handler)))

        assert sender.send_text("+1234567890", "hello") is False

    def test_not_configured(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "WHATSAPP_API_URL", "")
        calls = []
        transport = httpx.MockTransport(lambda request: calls.append(request) or httpx.Response(200))
        sender = WhatsAppSender(client=httpx.Client(transport=transport))

        assert sender.is_configured is False
        assert sender.send_text("+1234567890", "hello") is False
        assert calls == []
