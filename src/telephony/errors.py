"""Domain-specific exceptions for telephony operations.

Each error carries the HTTP status it maps to; translation into a response
happens once, in the exception handlers registered by ``main``.
"""

from __future__ import annotations


class TelephonyError(Exception):
    status_code: int = 500
    default_detail: str = "Telephony error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class ValidationError(TelephonyError):
    status_code = 400
    default_detail = "Missing required field."


class VerificationFailedError(TelephonyError):
    status_code = 400
    default_detail = "Invalid verification code"


class ProviderError(TelephonyError):
    status_code = 500
    default_detail = "Telephony provider request failed."


class NotFoundError(TelephonyError):
    status_code = 404
    default_detail = "Endpoint not found"


def require(*values: str | None, message: str) -> None:
    """Raise ``ValidationError`` when any value is missing or empty."""

    for value in values:
        if not value:
            raise ValidationError(message)
