"""Entry point for the VoIP backend (Twilio calls, SMS and phone verification)."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import router as api_router
from config.settings import get_settings
from integrations.twilio_client import get_twilio_config
from telephony.errors import NotFoundError, ProviderError, TelephonyError

LOGGER = logging.getLogger(__name__)

ENDPOINTS = {
    "voiceToken": "/api/voice/token",
    "initiateCall": "/api/calls/initiate",
    "endCall": "/api/calls/end/:callSid",
    "sendSMS": "/api/messages/send",
    "sendOTP": "/api/otp/send",
    "verifyOTP": "/api/otp/verify",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg = get_twilio_config()
    for name, present in cfg.presence().items():
        LOGGER.info("Twilio %s: %s", name, "set" if present else "MISSING")
    yield
    LOGGER.info("Shutting down")


settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# Routes tagged here report provider failures with an extra ``error`` field.
DETAILED_ERROR_TAGS = frozenset({"voice", "calls"})

app = FastAPI(
    title="VoIP Backend",
    description="Twilio access tokens, calls, SMS and phone verification.",
    lifespan=lifespan,
)


def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"success": False, "message": message}
    content.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status_code, content=content)


def _not_found(request: Request) -> JSONResponse:
    return _error_response(404, NotFoundError.default_detail, path=request.url.path)


def _route_tags(request: Request) -> set[str]:
    route = request.scope.get("route")
    return set(getattr(route, "tags", None) or ())


@app.middleware("http")
async def unhandled_error_middleware(request: Request, call_next):
    # Registered before CORS so that 500 responses still carry CORS headers.
    try:
        return await call_next(request)
    except Exception as exc:
        LOGGER.exception("Server error on %s %s", request.method, request.url.path)
        return _error_response(500, "Internal server error", error=str(exc))


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix="/api")


@app.exception_handler(TelephonyError)
async def telephony_error_handler(request: Request, exc: TelephonyError) -> JSONResponse:
    if isinstance(exc, NotFoundError):
        return _not_found(request)
    if isinstance(exc, ProviderError):
        LOGGER.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        detail = exc.detail if _route_tags(request) & DETAILED_ERROR_TAGS else None
        return _error_response(exc.status_code, exc.detail, error=detail)
    return _error_response(exc.status_code, exc.detail)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown method on a known path is reported like an unknown path.
    if exc.status_code in (404, 405):
        return _not_found(request)
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Raw input is not echoed back.
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    return _error_response(400, "Invalid request", errors=jsonable_encoder(errors))


@app.get("/")
async def index() -> dict:
    return {
        "status": "VoIP backend running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": ENDPOINTS,
    }


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
