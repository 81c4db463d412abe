"""FastAPI dependency providers, overridable in tests."""

from typing import Callable

from openai import AsyncOpenAI

from app.assets.store import RecordingStore
from app.classifier import get_classifier
from app.classifier.base import ResponseClassifier
from app.config import get_settings
from app.db.repository import BusinessRepository
from app.telephony.config import get_twilio_config
from app.telephony.orchestrator import CallTurnHandler
from app.telephony.service import TwilioService, get_twilio_service

_classifier: ResponseClassifier | None = None


def get_business_repository() -> BusinessRepository:
    return BusinessRepository()


def get_response_classifier() -> ResponseClassifier:
    """Classifier chosen by CLASSIFIER_STRATEGY, built once per process."""
    global _classifier
    if _classifier is None:
        settings = get_settings()
        _classifier = get_classifier(
            settings.classifier_strategy,
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            max_turns=get_twilio_config().max_turns,
        )
    return _classifier


def get_turn_handler() -> CallTurnHandler:
    return CallTurnHandler(
        repository=get_business_repository(),
        classifier=get_response_classifier(),
        config=get_twilio_config(),
    )


def get_turn_handler_factory() -> Callable[[], CallTurnHandler]:
    """The webhook builds its handler itself and answers with TwiML if that fails."""
    return get_turn_handler


def get_call_service() -> TwilioService:
    return get_twilio_service()


def get_recording_store() -> RecordingStore:
    settings = get_settings()
    openai_client = AsyncOpenAI(api_key=settings.openai_api_key) if settings.openai_api_key else None
    return RecordingStore(openai_client=openai_client)
