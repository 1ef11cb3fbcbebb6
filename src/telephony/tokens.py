"""Voice SDK access token issuance."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from integrations.twilio_client import TelephonyProvider

LOGGER = logging.getLogger(__name__)

TOKEN_TTL_SECONDS = 3600


@dataclass(frozen=True)
class IssuedToken:
    token: str
    identity: str
    expires_in: int = TOKEN_TTL_SECONDS


def default_identity(now: float | None = None) -> str:
    millis = int((time.time() if now is None else now) * 1000)
    return f"user_{millis}"


async def issue_token(
    provider: TelephonyProvider,
    identity: str | None = None,
    *,
    now: float | None = None,
) -> IssuedToken:
    """Sign a token allowing inbound calls and outbound calls via the TwiML app.

    An empty identity is replaced by a timestamp-based one.
    """

    identity = identity or default_identity(now)
    LOGGER.info("Generating access token for identity %s", identity)

    token = await provider.create_token(identity, TOKEN_TTL_SECONDS)

    LOGGER.debug("Access token generated for %s: %s...", identity, token[:20])
    return IssuedToken(token=token, identity=identity)
