"""TwiML builders for each kind of turn the call handler can emit."""

from twilio.twiml.voice_response import VoiceResponse

from app.telephony.turn_context import TurnContext


def listen(
    prompt: str,
    next_context: TurnContext,
    base_url: str,
    timeout: int = 5,
    voice: str | None = None,
    audio_url: str | None = None,
) -> VoiceResponse:
    """
    Speak (or play) a prompt inside a speech <Gather>.

    Twilio posts the transcript to the action URL. When the listening window
    closes with no speech it falls through to the <Redirect>, which reaches
    the same URL without a SpeechResult. Both carry `next_context`.
    """
    url = next_context.to_url(base_url)

    response = VoiceResponse()
    gather = response.gather(
        input="speech",
        timeout=timeout,
        speech_timeout="auto",
        action=url,
        method="POST",
    )
    if audio_url:
        gather.play(audio_url)
    else:
        gather.say(prompt, voice=voice)
    response.redirect(url, method="POST")
    return response


def hang_up(message: str, voice: str | None = None) -> VoiceResponse:
    """Speak a final message and end the call."""
    response = VoiceResponse()
    response.say(message, voice=voice)
    response.hangup()
    return response
