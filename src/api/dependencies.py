"""Shared FastAPI dependencies.

Separated to avoid circular imports between route modules.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from integrations.twilio_client import (
    TelephonyProvider,
    TwilioConfig,
    build_twilio_provider,
    get_twilio_config,
)

LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _provider_factory() -> TelephonyProvider:
    return build_twilio_provider()


def get_provider() -> TelephonyProvider:
    return _provider_factory()


def get_twilio_cfg() -> TwilioConfig:
    return get_twilio_config()


def public_base_url(request: Request, cfg: TwilioConfig) -> str:
    if cfg.public_base_url:
        return cfg.public_base_url
    # Request host may be wrong behind proxies; prefer PUBLIC_BASE_URL.
    return str(request.base_url).rstrip("/")


async def webhook_params(request: Request) -> dict[str, str]:
    """Merge query parameters over the form or JSON body, query first.

    An unreadable body is treated as empty so query parameters still apply.
    """

    params: dict[str, str] = {}
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            LOGGER.warning("Ignoring malformed JSON body on %s", request.url.path)
            body = None
        if isinstance(body, dict):
            params.update({k: str(v) for k, v in body.items() if v is not None})
    else:
        try:
            form = await request.form()
        except StarletteHTTPException as exc:
            LOGGER.warning("Ignoring malformed form body on %s: %s", request.url.path, exc.detail)
        else:
            params.update({k: str(v) for k, v in form.items()})

    params.update(request.query_params)
    return params
