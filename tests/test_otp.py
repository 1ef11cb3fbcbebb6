from __future__ import annotations

import asyncio
import random

import pytest

from conftest import FakeProvider
from telephony.errors import ValidationError, VerificationFailedError
from telephony.otp import generate_code, otp_message, send_otp, verify_otp


def test_generated_codes_are_six_digits_in_range():
    rng = random.Random(1234)
    for _ in range(2000):
        code = generate_code(rng)
        assert len(code) == 6
        assert code.isascii() and code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_generated_code_hits_range_bounds():
    class Bounds(random.Random):
        def __init__(self, value: int) -> None:
            super().__init__()
            self.value = value

        def randint(self, a: int, b: int) -> int:
            assert (a, b) == (100000, 999999)
            return self.value

    assert generate_code(Bounds(100000)) == "100000"
    assert generate_code(Bounds(999999)) == "999999"


def test_send_otp_texts_code_and_returns_it():
    provider = FakeProvider()

    dispatch = asyncio.run(send_otp(provider, "+15551230000", brand="TORRZ", rng=random.Random(7)))

    assert dispatch.request_id == "SM001"
    assert provider.messages == [("+15551230000", otp_message(dispatch.otp, "TORRZ"))]
    assert provider.messages[0][1] == (
        f"Your TORRZ verification code is: {dispatch.otp}. Valid for 10 minutes."
    )


def test_send_otp_requires_phone_number():
    provider = FakeProvider()
    with pytest.raises(ValidationError, match="Phone number is required"):
        asyncio.run(send_otp(provider, "", brand="TORRZ"))
    assert provider.messages == []


@pytest.mark.parametrize("code", ["123456", "000000", "abcdef", "12 34 "])
def test_verify_accepts_any_six_character_code(code):
    result = verify_otp("+15551230000", code, now=1700000000.5)

    assert result.user_phone_number == "+15551230000"
    assert result.token == "auth_token_1700000000500"


@pytest.mark.parametrize("code", ["123", "12345", "1234567"])
def test_verify_rejects_other_lengths(code):
    with pytest.raises(VerificationFailedError, match="Invalid verification code"):
        verify_otp("+15551230000", code)


@pytest.mark.parametrize(("phone", "code"), [(None, "123456"), ("+1555", None), ("", ""), (None, None)])
def test_verify_requires_both_fields(phone, code):
    with pytest.raises(ValidationError, match="Phone number and code are required"):
        verify_otp(phone, code)


def test_verify_never_consults_issued_codes():
    provider = FakeProvider()
    dispatch = asyncio.run(send_otp(provider, "+15551230000", brand="TORRZ"))
    other = "111111" if dispatch.otp != "111111" else "222222"

    assert verify_otp("+15551230000", other).user_phone_number == "+15551230000"


def test_verify_counts_utf16_code_units():
    # Each emoji is two UTF-16 code units.
    assert verify_otp("+15551230000", "\U0001F600" * 3).user_phone_number == "+15551230000"
    assert verify_otp("+15551230000", "ab\U0001F600cd").user_phone_number == "+15551230000"

    with pytest.raises(VerificationFailedError):
        verify_otp("+15551230000", "\U0001F600" * 6)
