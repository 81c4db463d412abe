"""
Call-turn handler: the conversation state machine of a survey call.

Each Twilio webhook invocation is one turn. Nothing is held in memory
between turns; the state is re-derived from the business record (looked up
by phone number) and the TurnContext embedded in the webhook URL.

    NOT_STARTED -> AWAITING_RESPONSE -> (AWAITING_RESPONSE | COMPLETED)

Every path, including failures, ends in a TwiML document so the callee is
never left on an open line without instructions.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from twilio.twiml.voice_response import VoiceResponse

from app.classifier.base import ClassificationResult, EndReason, ResponseClassifier
from app.db.repository import BusinessRepository
from app.models.business import CallStatus
from app.telephony import call_scripts, twiml
from app.telephony.config import TwilioConfig
from app.telephony.turn_context import TurnContext

logger = structlog.get_logger()


class CallState(str, Enum):
    """Where the conversation stands after a turn."""

    NOT_STARTED = "not_started"
    AWAITING_RESPONSE = "awaiting_response"
    COMPLETED = "completed"


@dataclass
class TurnOutcome:
    """Result of handling one turn."""

    state: CallState
    response: VoiceResponse

    @property
    def twiml(self) -> str:
        return str(self.response)


class CallTurnHandler:
    """Decide what to say next and which record update to apply."""

    def __init__(
        self,
        repository: BusinessRepository,
        classifier: ResponseClassifier,
        config: TwilioConfig,
    ):
        self.repository = repository
        self.classifier = classifier
        self.config = config

    async def handle_turn(self, context: TurnContext, transcript: str | None) -> TurnOutcome:
        """
        Handle one webhook turn.

        Args:
            context: Correlation phone and counters rebuilt from the request
            transcript: SpeechResult of the last utterance, None on the first turn

        Returns:
            The resulting state and the TwiML to send back
        """
        try:
            return await self._handle_turn(context, transcript)
        except Exception:
            logger.exception(
                "Call turn failed",
                phone=context.phone,
                turn=context.turn,
                retries=context.retries,
            )
            return self._hang_up(call_scripts.ERROR_GOODBYE)

    async def _handle_turn(self, context: TurnContext, transcript: str | None) -> TurnOutcome:
        business = self.repository.get_by_phone(context.phone)
        if not business:
            logger.warning("No business found for call", phone=context.phone, turn=context.turn)
            return self._hang_up(call_scripts.UNKNOWN_BUSINESS_GOODBYE)

        if transcript is None and context.is_first_turn:
            return self._start(business, context)

        transcript = (transcript or "").strip()
        if not transcript:
            return self._handle_silence(business, context)

        return await self._handle_answer(business, context, transcript)

    def _start(self, business: dict, context: TurnContext) -> TurnOutcome:
        # Written on its own; the completion update later is a separate write.
        self.repository.update_call_status(business["id"], CallStatus.IN_PROGRESS)

        logger.info("Call started", business_id=business["id"], phone=context.phone)
        return self._listen(
            call_scripts.GREETING,
            context.next_turn(),
            audio_url=self.config.greeting_audio_url or None,
        )

    def _handle_silence(self, business: dict, context: TurnContext) -> TurnOutcome:
        if context.retries >= self.config.max_empty_retries:
            self.repository.update_call_status(business["id"], CallStatus.COMPLETED)
            logger.info(
                "No response after retries, ending call",
                business_id=business["id"],
                retries=context.retries,
            )
            return self._hang_up(call_scripts.NO_RESPONSE_GOODBYE)

        logger.info("Empty transcript, asking again", business_id=business["id"], retries=context.retries)
        return self._listen(call_scripts.REPROMPT, context.retry())

    async def _handle_answer(
        self,
        business: dict,
        context: TurnContext,
        transcript: str,
    ) -> TurnOutcome:
        result = await self.classifier.classify(transcript, context)

        if not result.should_end_call and context.turn >= self.config.max_turns:
            result = result.model_copy(
                update={
                    "should_end_call": True,
                    "next_response": None,
                    "end_reason": EndReason.MAX_ATTEMPTS_REACHED,
                }
            )

        if result.should_end_call:
            return self._complete(business, context, result)

        logger.info(
            "Continuing conversation",
            business_id=business["id"],
            turn=context.turn,
            classifier=self.classifier.name,
        )
        return self._listen(result.next_response or call_scripts.REPROMPT, context.next_turn())

    def _complete(
        self,
        business: dict,
        context: TurnContext,
        result: ClassificationResult,
    ) -> TurnOutcome:
        self.repository.record_call_result(business["id"], result)

        logger.info(
            "Call completed",
            business_id=business["id"],
            phone=context.phone,
            turn=context.turn,
            end_reason=result.end_reason.value if result.end_reason else None,
        )
        return self._hang_up(result.next_response or call_scripts.CLOSING)

    def _listen(
        self,
        prompt: str,
        next_context: TurnContext,
        audio_url: str | None = None,
    ) -> TurnOutcome:
        """Speak and open a listening window whose replies carry `next_context`."""
        response = twiml.listen(
            prompt,
            next_context,
            base_url=self.config.public_base_url,
            timeout=self.config.gather_timeout_seconds,
            voice=self.config.tts_voice,
            audio_url=audio_url,
        )
        return TurnOutcome(CallState.AWAITING_RESPONSE, response)

    def _hang_up(self, message: str) -> TurnOutcome:
        return TurnOutcome(
            CallState.COMPLETED,
            twiml.hang_up(message, voice=self.config.tts_voice),
        )
