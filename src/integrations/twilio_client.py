"""Twilio-backed implementation of the telephony provider interface."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import cached_property, lru_cache
from typing import Protocol

from twilio.base.exceptions import TwilioException
from twilio.jwt.access_token import AccessToken
from twilio.jwt.access_token.grants import VoiceGrant
from twilio.rest import Client

from config.settings import get_settings
from telephony.errors import ProviderError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TwilioConfig:
    account_sid: str | None
    auth_token: str | None
    api_key: str | None
    api_secret: str | None
    twiml_app_sid: str | None
    phone_number: str | None
    public_base_url: str | None = None

    def presence(self) -> dict[str, bool]:
        """Which credentials are set, without exposing their values."""

        return {
            "account_sid": bool(self.account_sid),
            "auth_token": bool(self.auth_token),
            "api_key": bool(self.api_key),
            "api_secret": bool(self.api_secret),
            "twiml_app_sid": bool(self.twiml_app_sid),
            "phone_number": bool(self.phone_number),
        }


@lru_cache(maxsize=1)
def get_twilio_config() -> TwilioConfig:
    settings = get_settings()
    return TwilioConfig(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        api_key=settings.twilio_api_key,
        api_secret=settings.twilio_api_secret,
        twiml_app_sid=settings.twilio_twiml_app_sid,
        phone_number=settings.twilio_phone_number,
        public_base_url=settings.public_base_url,
    )


@dataclass(frozen=True)
class CallRecord:
    sid: str
    status: str


@dataclass(frozen=True)
class MessageRecord:
    sid: str
    status: str | None = None


class TelephonyProvider(Protocol):
    async def create_token(self, identity: str, ttl: int) -> str: ...

    async def create_call(
        self,
        to_number: str,
        *,
        url: str,
        status_callback: str,
        status_events: Sequence[str],
    ) -> CallRecord: ...

    async def update_call(self, call_sid: str, *, status: str) -> CallRecord: ...

    async def send_message(self, to_number: str, body: str) -> MessageRecord: ...


class TwilioProvider:
    """Thin async wrapper over ``twilio.rest.Client``.

    Every call originates from the configured system number. Missing
    credentials are reported per request, so the process can start without
    them.
    """

    def __init__(self, cfg: TwilioConfig) -> None:
        self._cfg = cfg

    @cached_property
    def client(self) -> Client:
        if not self._cfg.account_sid or not self._cfg.auth_token:
            raise ProviderError("Twilio credentials are not configured")
        return Client(self._cfg.account_sid, self._cfg.auth_token)

    def _from_number(self) -> str:
        if not self._cfg.phone_number:
            raise ProviderError("Twilio phone number is not configured")
        return self._cfg.phone_number

    async def create_token(self, identity: str, ttl: int) -> str:
        cfg = self._cfg
        if not (cfg.account_sid and cfg.api_key and cfg.api_secret):
            raise ProviderError("Twilio API key credentials are not configured")

        token = AccessToken(cfg.account_sid, cfg.api_key, cfg.api_secret, identity=identity, ttl=ttl)
        token.add_grant(
            VoiceGrant(
                outgoing_application_sid=cfg.twiml_app_sid,
                incoming_allow=True,
            )
        )
        try:
            jwt = token.to_jwt()
        except (TwilioException, ValueError, TypeError) as exc:
            raise ProviderError(str(exc) or "Failed to generate token") from exc
        return jwt.decode("utf-8") if isinstance(jwt, bytes) else jwt

    async def create_call(
        self,
        to_number: str,
        *,
        url: str,
        status_callback: str,
        status_events: Sequence[str],
    ) -> CallRecord:
        from_number = self._from_number()
        call = await self._run(
            self.client.calls.create,
            to=to_number,
            from_=from_number,
            url=url,
            status_callback=status_callback,
            status_callback_event=list(status_events),
            status_callback_method="POST",
        )
        return CallRecord(sid=str(call.sid), status=str(call.status))

    async def update_call(self, call_sid: str, *, status: str) -> CallRecord:
        call = await self._run(self.client.calls(call_sid).update, status=status)
        return CallRecord(sid=str(call.sid), status=str(call.status))

    async def send_message(self, to_number: str, body: str) -> MessageRecord:
        from_number = self._from_number()
        message = await self._run(
            self.client.messages.create,
            to=to_number,
            from_=from_number,
            body=body,
        )
        status = str(message.status) if message.status else None
        return MessageRecord(sid=str(message.sid), status=status)

    @staticmethod
    async def _run(func, /, **kwargs):
        try:
            return await asyncio.to_thread(func, **kwargs)
        except TwilioException as exc:
            LOGGER.warning("Twilio request failed: %s", exc)
            raise ProviderError(getattr(exc, "msg", None) or str(exc)) from exc


def build_twilio_provider() -> TwilioProvider:
    return TwilioProvider(get_twilio_config())
