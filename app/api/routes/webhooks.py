"""
Webhook handler for Twilio voice turns.

Twilio posts here once per conversation turn (form-encoded) and expects a
TwiML document back. Every request that passes signature validation gets
TwiML, even when something fails while handling the turn.
"""

from typing import Callable

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from twilio.request_validator import RequestValidator

from app.api.dependencies import get_turn_handler_factory
from app.telephony import call_scripts, twiml
from app.telephony.config import TwilioConfig, get_twilio_config
from app.telephony.orchestrator import CallTurnHandler
from app.telephony.turn_context import TurnContext

logger = structlog.get_logger()

router = APIRouter(tags=["webhooks"])

TWIML_MEDIA_TYPE = "application/xml"


@router.post("/call-handler")
async def handle_call_turn(
    request: Request,
    handler_factory: Callable[[], CallTurnHandler] = Depends(get_turn_handler_factory),
    config: TwilioConfig = Depends(get_twilio_config),
) -> Response:
    """
    Handle one turn of a survey call.

    Form fields used:
    - SpeechResult: transcript of the callee's last utterance (absent on the first turn)
    - To / Called: the business number, when the query string does not carry it
    Query parameters carry the TurnContext set by the previous turn.
    """
    form = await request.form()
    params = {key: str(value) for key, value in form.items()}

    if config.validate_webhook_signatures:
        url = f"{config.public_base_url.rstrip('/')}{request.url.path}"
        if request.url.query:
            url = f"{url}?{request.url.query}"
        signature = request.headers.get("X-Twilio-Signature", "")
        if not RequestValidator(config.twilio_auth_token).validate(url, params, signature):
            logger.warning("Rejected webhook with invalid signature", url=url)
            raise HTTPException(status_code=403, detail="Invalid Twilio signature")

    context = TurnContext.from_request(request.query_params, params)
    transcript = params.get("SpeechResult")

    logger.info(
        "Received call turn",
        call_sid=params.get("CallSid"),
        phone=context.phone,
        turn=context.turn,
        retries=context.retries,
        has_transcript=transcript is not None,
    )

    try:
        handler = handler_factory()
    except Exception:
        logger.exception("Could not build turn handler", phone=context.phone)
        goodbye = twiml.hang_up(call_scripts.ERROR_GOODBYE, voice=config.tts_voice)
        return Response(content=str(goodbye), media_type=TWIML_MEDIA_TYPE)

    outcome = await handler.handle_turn(context, transcript)

    logger.info("Call turn handled", phone=context.phone, state=outcome.state.value)
    return Response(content=outcome.twiml, media_type=TWIML_MEDIA_TYPE)


@router.get("/call-handler/health")
async def webhook_health() -> dict[str, str]:
    """Health check for webhook endpoint."""
    return {"status": "ok", "endpoint": "call-handler"}
