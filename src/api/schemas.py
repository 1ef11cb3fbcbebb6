"""API-facing Pydantic models.

Field names are exposed in camelCase on the wire. Request fields are all
optional so that missing values are reported as 400 by the service layer.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CallInitiateRequest(CamelModel):
    to_number: str | None = None
    from_number: str | None = None


class MessageSendRequest(CamelModel):
    to_number: str | None = None
    message: str | None = None


class OtpSendRequest(CamelModel):
    phone_number: str | None = None


class OtpVerifyRequest(CamelModel):
    phone_number: str | None = None
    code: str | None = None


class TokenResponse(CamelModel):
    success: bool = True
    token: str
    identity: str
    expires_in: int


class CallResponse(CamelModel):
    success: bool = True
    message: str
    call_sid: str
    status: str


class MessageSendResponse(CamelModel):
    success: bool = True
    message: str = "SMS sent successfully"
    message_sid: str


class OtpSendResponse(CamelModel):
    success: bool = True
    message: str = "OTP sent successfully"
    request_id: str
    otp: str


class OtpVerifyResponse(CamelModel):
    success: bool = True
    message: str = "Phone number verified successfully"
    token: str
    user_phone_number: str
