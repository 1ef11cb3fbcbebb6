"""FastAPI routes for access tokens, SMS and phone verification."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from api.call_routes import router as call_router
from api.dependencies import get_provider
from api.schemas import (
    MessageSendRequest,
    MessageSendResponse,
    OtpSendRequest,
    OtpSendResponse,
    OtpVerifyRequest,
    OtpVerifyResponse,
    TokenResponse,
)
from config.settings import get_settings
from integrations.twilio_client import TelephonyProvider
from telephony.messaging import send_message
from telephony.otp import send_otp, verify_otp
from telephony.tokens import issue_token
from telephony.twiml import render_auto_reply

LOGGER = logging.getLogger(__name__)

router = APIRouter()
router.include_router(call_router)


@router.get("/voice/token", response_model=TokenResponse, tags=["voice"])
async def voice_token(
    identity: str | None = None,
    provider: TelephonyProvider = Depends(get_provider),
) -> TokenResponse:
    issued = await issue_token(provider, identity)
    return TokenResponse(token=issued.token, identity=issued.identity, expires_in=issued.expires_in)


@router.post("/otp/send", response_model=OtpSendResponse, tags=["otp"])
async def otp_send(
    payload: OtpSendRequest | None = None,
    provider: TelephonyProvider = Depends(get_provider),
) -> OtpSendResponse:
    payload = payload or OtpSendRequest()
    dispatch = await send_otp(provider, payload.phone_number, brand=get_settings().brand_name)
    # The code is echoed back to the client; do not expose this in production.
    return OtpSendResponse(request_id=dispatch.request_id, otp=dispatch.otp)


@router.post("/otp/verify", response_model=OtpVerifyResponse, tags=["otp"])
async def otp_verify(payload: OtpVerifyRequest | None = None) -> OtpVerifyResponse:
    payload = payload or OtpVerifyRequest()
    result = verify_otp(payload.phone_number, payload.code)
    return OtpVerifyResponse(token=result.token, user_phone_number=result.user_phone_number)


@router.post("/messages/send", response_model=MessageSendResponse, tags=["messages"])
async def messages_send(
    payload: MessageSendRequest | None = None,
    provider: TelephonyProvider = Depends(get_provider),
) -> MessageSendResponse:
    payload = payload or MessageSendRequest()
    message = await send_message(provider, payload.to_number, payload.message)
    return MessageSendResponse(message_sid=message.sid)


@router.post("/messages/receive", tags=["messages"])
async def messages_receive(request: Request) -> Response:
    form = await request.form()
    sender = form.get("From")
    body = form.get("Body")
    LOGGER.info("Received SMS %s from %s: %s", form.get("MessageSid"), sender, body)
    return Response(content=render_auto_reply(body), media_type="text/xml")
