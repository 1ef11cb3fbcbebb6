"""TwiML builders for call-control and SMS auto-reply webhooks."""

from __future__ import annotations

from twilio.twiml.messaging_response import MessagingResponse
from twilio.twiml.voice_response import VoiceResponse

DIAL_TIMEOUT_SECONDS = 30
NO_DESTINATION_TEXT = "No destination number was provided."
AUTO_REPLY_PREFIX = "Thank you for your message! We received: "


def render_call_markup(
    to_number: str | None,
    *,
    caller_id: str | None,
    voice: str = "alice",
    language: str = "en-US",
) -> str:
    """Bridge the leg to ``to_number``, or apologise when there is none.

    The presence of a destination is the only branch.
    """

    response = VoiceResponse()
    if to_number:
        dial = response.dial(
            caller_id=caller_id,
            answer_on_bridge=True,
            timeout=DIAL_TIMEOUT_SECONDS,
        )
        dial.number(to_number)
    else:
        response.say(NO_DESTINATION_TEXT, voice=voice, language=language)
    return str(response)


def render_auto_reply(body: str | None) -> str:
    response = MessagingResponse()
    response.message(AUTO_REPLY_PREFIX + (body or ""))
    return str(response)
