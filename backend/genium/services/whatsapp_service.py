"""
WhatsApp gateway adapter: sender normalization and outbound delivery.
"""

import logging
import re
from typing import Optional

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)

_JID_SUFFIX = re.compile(r"@.*$")


def normalize_sender(sender: str) -> str:
    """
    Normalize a WhatsApp sender into a broker phone number.

    Strips any JID suffix (e.g. '@s.whatsapp.net', '@c.us') and
    prefixes '+' when missing.

    Args:
        sender: Raw sender id from the gateway

    Returns:
        Phone number like '+1234567890', or '' for an empty sender
    """
    number = _JID_SUFFIX.sub("", sender or "").strip()
    if not number:
        return ""
    return number if number.startswith("+") else f"+{number}"


class WhatsAppSender:
    """
    Delivers answer texts back to brokers through the configured
    WhatsApp HTTP gateway.
    """

    def __init__(self, client: Optional[httpx.Client] = None):
        self.settings = get_settings()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.WHATSAPP_API_URL and self.settings.WHATSAPP_API_KEY)

    def send_text(self, phone_number: str, text: str) -> bool:
        """
        Send a text message.

        Args:
            phone_number: Recipient, with or without '+'
            text: Message body

        Returns:
            True if the gateway accepted the message
        """
        if not self.is_configured:
            logger.warning("WhatsApp API not configured - response not sent")
            return False

        url = f"{self.settings.WHATSAPP_API_URL.rstrip('/')}/messages"
        payload = {"number": phone_number.lstrip("+"), "text": text}
        headers = {"apikey": self.settings.WHATSAPP_API_KEY}

        try:
            if self._client is not None:
                response = self._client.post(url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=self.settings.WHATSAPP_TIMEOUT_SECONDS) as client:
                    response = client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"WhatsApp send to {phone_number} failed: {e}")
            return False

        logger.info(f"Response sent to WhatsApp number {phone_number}")
        return True


# Singleton instance
_whatsapp_sender: Optional[WhatsAppSender] = None


def get_whatsapp_sender() -> WhatsAppSender:
    """
    Get or create the WhatsApp sender singleton.

    Returns:
        WhatsAppSender instance
    """
    global _whatsapp_sender

    if _whatsapp_sender is None:
        _whatsapp_sender = WhatsAppSender()

    return _whatsapp_sender
