from __future__ import annotations

import asyncio

import pytest

from conftest import FakeProvider
from telephony.calls import CALL_STATUS_EVENTS, end_call, initiate_call
from telephony.errors import ProviderError, ValidationError
from telephony.messaging import send_message


def test_initiate_call_builds_callback_urls_from_base():
    provider = FakeProvider()

    call = asyncio.run(
        initiate_call(provider, "+15551234567", "+15550000000", base_url="https://voip.example.com/")
    )

    assert call.sid == "CA123"
    assert call.status == "queued"
    created = provider.created_calls[0]
    assert created["to"] == "+15551234567"
    assert created["url"] == "https://voip.example.com/api/calls/twiml"
    assert created["status_callback"] == "https://voip.example.com/api/calls/status"
    assert created["status_events"] == ["initiated", "ringing", "answered", "completed"]
    assert list(CALL_STATUS_EVENTS) == created["status_events"]


def test_initiate_call_does_not_forward_from_number():
    provider = FakeProvider()

    asyncio.run(initiate_call(provider, "+15551234567", "+19998887777", base_url="http://h"))

    created = provider.created_calls[0]
    assert "+19998887777" not in created.values()


@pytest.mark.parametrize(("to", "frm"), [(None, "+1555"), ("+1555", None), ("", "+1555"), (None, None)])
def test_initiate_call_requires_both_numbers(to, frm):
    provider = FakeProvider()
    with pytest.raises(ValidationError, match="Both toNumber and fromNumber are required"):
        asyncio.run(initiate_call(provider, to, frm, base_url="http://h"))
    assert provider.created_calls == []


def test_end_call_completes_call():
    provider = FakeProvider()

    call = asyncio.run(end_call(provider, "CA999"))

    assert provider.updated_calls == [("CA999", "completed")]
    assert call.sid == "CA999"
    assert call.status == "completed"


def test_end_call_requires_sid():
    with pytest.raises(ValidationError, match="Call SID is required"):
        asyncio.run(end_call(FakeProvider(), ""))


def test_provider_errors_propagate():
    provider = FakeProvider(error=ProviderError("The 'To' number is not a valid phone number."))
    with pytest.raises(ProviderError, match="not a valid phone number"):
        asyncio.run(initiate_call(provider, "bogus", "+1555", base_url="http://h"))


def test_send_message_requires_both_fields():
    provider = FakeProvider()
    with pytest.raises(ValidationError, match="toNumber and message are required"):
        asyncio.run(send_message(provider, "+15551234567", ""))

    message = asyncio.run(send_message(provider, "+15551234567", "hello"))
    assert message.sid == "SM001"
    assert provider.messages == [("+15551234567", "hello")]
