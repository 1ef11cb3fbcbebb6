"""Twilio Voice call control.

This module provides:
- Outbound call initiation and termination.
- TwiML webhook bridging a Voice SDK leg to a phone number.
- Call status webhook (logged only).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies import get_provider, get_twilio_cfg, public_base_url, webhook_params
from api.schemas import CallInitiateRequest, CallResponse
from config.settings import get_settings
from integrations.twilio_client import TelephonyProvider, TwilioConfig
from telephony.calls import end_call, initiate_call, log_status_update
from telephony.twiml import render_call_markup

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/calls", tags=["calls"])


def _twiml_response(xml: str) -> Response:
    return Response(content=xml, media_type="text/xml")


@router.post("/initiate", response_model=CallResponse)
async def create_call(
    request: Request,
    payload: CallInitiateRequest | None = None,
    provider: TelephonyProvider = Depends(get_provider),
    cfg: TwilioConfig = Depends(get_twilio_cfg),
) -> CallResponse:
    payload = payload or CallInitiateRequest()
    call = await initiate_call(
        provider,
        payload.to_number,
        payload.from_number,
        base_url=public_base_url(request, cfg),
    )
    return CallResponse(
        message="Call initiated successfully",
        call_sid=call.sid,
        status=call.status,
    )


@router.delete("/end/{call_sid}", response_model=CallResponse)
async def terminate_call(
    call_sid: str,
    provider: TelephonyProvider = Depends(get_provider),
) -> CallResponse:
    call = await end_call(provider, call_sid)
    return CallResponse(
        message="Call ended successfully",
        call_sid=call.sid,
        status=call.status,
    )


@router.post("/twiml")
async def call_twiml(
    request: Request,
    cfg: TwilioConfig = Depends(get_twilio_cfg),
) -> Response:
    settings = get_settings()
    params = await webhook_params(request)
    to_number = params.get("To")

    LOGGER.info("TwiML request to=%s from=%s", to_number, params.get("From"))
    if not to_number:
        LOGGER.warning("TwiML request without destination number")

    xml = render_call_markup(
        to_number,
        caller_id=cfg.phone_number,
        voice=settings.twilio_say_voice,
        language=settings.twilio_say_language,
    )
    LOGGER.debug("TwiML: %s", xml)
    return _twiml_response(xml)


@router.post("/status")
async def call_status(request: Request) -> Response:
    form = await request.form()
    log_status_update(
        form.get("CallSid"),
        form.get("CallStatus"),
        form.get("From"),
        form.get("To"),
        form.get("Duration"),
    )
    return Response(status_code=200)
