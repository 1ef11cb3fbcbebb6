"""Outbound call control."""

from __future__ import annotations

import logging
from enum import Enum

from integrations.twilio_client import CallRecord, TelephonyProvider
from telephony.errors import require

LOGGER = logging.getLogger(__name__)


class CallStatus(str, Enum):
    QUEUED = "queued"
    INITIATED = "initiated"
    RINGING = "ringing"
    ANSWERED = "answered"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    BUSY = "busy"
    FAILED = "failed"
    NO_ANSWER = "no-answer"
    CANCELED = "canceled"


# Status callback events requested from Twilio for every outbound call.
CALL_STATUS_EVENTS: tuple[str, ...] = (
    CallStatus.INITIATED.value,
    CallStatus.RINGING.value,
    CallStatus.ANSWERED.value,
    CallStatus.COMPLETED.value,
)

TWIML_PATH = "/api/calls/twiml"
STATUS_PATH = "/api/calls/status"


async def initiate_call(
    provider: TelephonyProvider,
    to_number: str | None,
    from_number: str | None,
    *,
    base_url: str,
) -> CallRecord:
    require(to_number, from_number, message="Both toNumber and fromNumber are required")

    # from_number is required but the provider always dials from the system number.
    LOGGER.info("Initiating call from %s to %s", from_number, to_number)

    base = base_url.rstrip("/")
    call = await provider.create_call(
        to_number,
        url=f"{base}{TWIML_PATH}",
        status_callback=f"{base}{STATUS_PATH}",
        status_events=CALL_STATUS_EVENTS,
    )
    LOGGER.info("Call initiated: %s (%s)", call.sid, call.status)
    return call


async def end_call(provider: TelephonyProvider, call_sid: str | None) -> CallRecord:
    require(call_sid, message="Call SID is required")

    LOGGER.info("Ending call %s", call_sid)
    call = await provider.update_call(call_sid, status=CallStatus.COMPLETED.value)
    LOGGER.info("Call ended: %s", call.sid)
    return call


def log_status_update(
    call_sid: str | None,
    call_status: str | None,
    from_number: str | None,
    to_number: str | None,
    duration: str | None = None,
) -> None:
    if duration:
        LOGGER.info(
            "Call status update sid=%s status=%s from=%s to=%s duration=%ss",
            call_sid,
            call_status,
            from_number,
            to_number,
            duration,
        )
    else:
        LOGGER.info(
            "Call status update sid=%s status=%s from=%s to=%s",
            call_sid,
            call_status,
            from_number,
            to_number,
        )
