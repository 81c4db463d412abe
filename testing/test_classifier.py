"""Pattern and reasoning response classifiers."""

import asyncio
import json

import httpx
import openai
import pytest

from app.classifier import (
    ClassificationError,
    EndReason,
    PatternClassifier,
    ReasoningClassifier,
    get_classifier,
)
from app.classifier.pattern import detect_discount, extract_amount
from app.classifier.reasoning import strip_code_fence
from app.telephony.turn_context import TurnContext

CONTEXT = TurnContext(phone="+15551234567", turn=1)


# ── Pattern strategy ──────────────────────────────────────


def test_affirmative_with_percentage():
    result = PatternClassifier().classify_text("Yes we offer 15% off")

    assert result.has_discount is True
    assert result.discount_amount == "15%"
    assert result.should_end_call is True
    assert result.end_reason == EndReason.GOT_COMPLETE_INFO


def test_negated_offer():
    result = PatternClassifier().classify_text("No we don't offer that")

    assert result.has_discount is False
    assert result.discount_amount is None
    assert result.end_reason == EndReason.NO_DISCOUNT_CONFIRMED


def test_written_number_percent():
    result = PatternClassifier().classify_text("ten percent for veterans")

    assert result.discount_amount == "10%"


@pytest.mark.parametrize(
    "text,amount",
    [
        ("we give 20 percent", "20%"),
        ("it's a 12 percentage discount", "12%"),
        ("5 dollars off any meal", "5 dollars off"),
        ("fifteen percent with ID", "15%"),
        ("twenty dollars off", "20 dollars off"),
        ("we have 10% and also 20 percent", "10%"),
        ("we're open until 9 tonight", None),
    ],
)
def test_extract_amount(text, amount):
    assert extract_amount(text) == amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Yeah, we do", True),
        ("Correct", True),
        ("Our store provides a discount to veterans", True),
        ("We don't have one", False),
        ("He doesn't give discounts", False),
        ("We do not offer any", False),
        ("Sorry, wrong number", False),
        ("The manager was out yesterday, nothing like that here", False),
        ("Sorry, we haven't got anything like that", False),
        ("That's a correction to my earlier answer", False),
        ("Everyone who served offers proof and gets ten percent", True),
        ("We don’t offer that", False),
    ],
)
def test_detect_discount(text, expected):
    assert detect_discount(text) is expected


def test_details_hold_full_transcript():
    transcript = "  Yes, 10% for active duty only, weekdays  "
    result = PatternClassifier().classify_text(transcript)

    assert result.discount_details == transcript.strip()


def test_pattern_always_ends_call():
    result = asyncio.run(PatternClassifier().classify("hmm let me check", CONTEXT))

    assert result.should_end_call is True
    assert result.next_response is None


# ── Reasoning strategy ────────────────────────────────────


class FakeResponses:
    def __init__(self, output_text=None, error=None):
        self.output_text = output_text
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        return type("Response", (), {"output_text": self.output_text})()


class FakeOpenAI:
    def __init__(self, **kwargs):
        self.responses = FakeResponses(**kwargs)


def _answer(**overrides):
    answer = {
        "hasDiscount": True,
        "discountAmount": "15%",
        "discountDetails": "15% off for veterans with ID",
        "availabilityInfo": None,
        "eligibilityInfo": "veterans",
        "nextResponse": "Just to confirm, that's 15 percent?",
        "shouldEndCall": False,
        "endReason": "continue",
    }
    answer.update(overrides)
    return json.dumps(answer)


def test_reasoning_parses_structured_output():
    client = FakeOpenAI(output_text=_answer())
    classifier = ReasoningClassifier(client=client, model="test-model", max_turns=4)

    result = asyncio.run(classifier.classify("Yes, fifteen percent for veterans", CONTEXT))

    assert result.has_discount is True
    assert result.discount_amount == "15%"
    assert result.eligibility_info == "veterans"
    assert result.availability_info is None
    assert result.should_end_call is False
    assert result.end_reason == EndReason.CONTINUE
    assert result.next_response == "Just to confirm, that's 15 percent?"

    request = client.responses.requests[0]
    assert request["model"] == "test-model"
    assert request["text"]["format"]["type"] == "json_schema"
    assert "fifteen percent" in request["input"]


def test_reasoning_accepts_fenced_json():
    client = FakeOpenAI(output_text="```json\n" + _answer(shouldEndCall=True) + "\n```")

    result = asyncio.run(ReasoningClassifier(client=client).classify("yes", CONTEXT))

    assert result.should_end_call is True


@pytest.mark.parametrize(
    "output_text",
    [
        "not json at all",
        "",
        json.dumps({"hasDiscount": True, "shouldEndCall": True}),  # missing nextResponse
        _answer(endReason="because"),
    ],
)
def test_reasoning_rejects_malformed_output(output_text):
    client = FakeOpenAI(output_text=output_text)

    with pytest.raises(ClassificationError):
        asyncio.run(ReasoningClassifier(client=client).classify("yes", CONTEXT))


def test_reasoning_propagates_service_failure():
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/responses"))
    client = FakeOpenAI(error=error)

    with pytest.raises(ClassificationError):
        asyncio.run(ReasoningClassifier(client=client).classify("yes", CONTEXT))


def test_strip_code_fence_leaves_plain_json():
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'


# ── Strategy selection ────────────────────────────────────


def test_get_classifier_by_name():
    assert isinstance(get_classifier("pattern"), PatternClassifier)
    assert isinstance(get_classifier("reasoning", client=FakeOpenAI()), ReasoningClassifier)

    with pytest.raises(ValueError):
        get_classifier("telepathy")
