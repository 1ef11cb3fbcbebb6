"""Placeholder phone verification.

Issued codes are not stored anywhere: ``verify_otp`` only checks that the
submitted code has six characters, and ``send_otp`` hands the code back to
the caller. Both are known weaknesses of the current flow.
"""

from __future__ import annotations

import logging
import random
import secrets
import time
from dataclasses import dataclass

from integrations.twilio_client import TelephonyProvider
from telephony.errors import VerificationFailedError, require
from telephony.messaging import send_message

LOGGER = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999
OTP_LENGTH = 6
OTP_VALIDITY_MINUTES = 10

_SYSTEM_RANDOM = secrets.SystemRandom()


@dataclass(frozen=True)
class OtpDispatch:
    request_id: str
    otp: str


@dataclass(frozen=True)
class OtpVerification:
    token: str
    user_phone_number: str


def _utf16_length(value: str) -> int:
    # Counted in UTF-16 code units: characters outside the BMP count twice.
    return len(value.encode("utf-16-le", errors="surrogatepass")) // 2


def generate_code(rng: random.Random | None = None) -> str:
    return str((rng or _SYSTEM_RANDOM).randint(OTP_MIN, OTP_MAX))


def otp_message(code: str, brand: str) -> str:
    return f"Your {brand} verification code is: {code}. Valid for {OTP_VALIDITY_MINUTES} minutes."


async def send_otp(
    provider: TelephonyProvider,
    phone_number: str | None,
    *,
    brand: str,
    rng: random.Random | None = None,
) -> OtpDispatch:
    require(phone_number, message="Phone number is required")

    code = generate_code(rng)
    message = await send_message(provider, phone_number, otp_message(code, brand))
    LOGGER.info("OTP sent to %s (request %s)", phone_number, message.sid)
    return OtpDispatch(request_id=message.sid, otp=code)


def verify_otp(
    phone_number: str | None,
    code: str | None,
    *,
    now: float | None = None,
) -> OtpVerification:
    require(phone_number, code, message="Phone number and code are required")

    if _utf16_length(code) != OTP_LENGTH:
        raise VerificationFailedError()

    millis = int((time.time() if now is None else now) * 1000)
    return OtpVerification(token=f"auth_token_{millis}", user_phone_number=phone_number)
