"""Outbound SMS."""

from __future__ import annotations

import logging

from integrations.twilio_client import MessageRecord, TelephonyProvider
from telephony.errors import require

LOGGER = logging.getLogger(__name__)


async def send_message(
    provider: TelephonyProvider,
    to_number: str | None,
    body: str | None,
) -> MessageRecord:
    require(to_number, body, message="toNumber and message are required")

    LOGGER.info("Sending SMS to %s", to_number)
    message = await provider.send_message(to_number, body)
    LOGGER.info("SMS sent: %s", message.sid)
    return message
