"""
Pattern-matching response classifier.

A token scan with no external calls. It always ends the call after the
first transcribed answer, so conversations driven by it are one question
long.

Complex negation ("we used to but don't anymore") is not understood; the
scan only looks for a negator directly in front of the offer verb.
"""

import re

import structlog

from app.classifier.base import ClassificationResult, EndReason, ResponseClassifier
from app.telephony.turn_context import TurnContext

logger = structlog.get_logger()

AFFIRMATIVE = re.compile(r"\b(?:yes|yeah|we do|correct|offers?|offered|have|gives|provides)\b")
NEGATED = re.compile(r"\b(?:no|don't|not|doesn't)\s+(?:offer|have|give|provide)")

WRITTEN_NUMBERS = {
    "ten": 10,
    "fifteen": 15,
    "twenty": 20,
}

_NUMBER = r"(\d+(?:\.\d+)?)"
_WORD = r"\b(" + "|".join(WRITTEN_NUMBERS) + r")\b"

# Tried in order; the first pattern that matches wins.
AMOUNT_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(_NUMBER + r"\s*%"), "%"),
    (re.compile(_NUMBER + r"\s*percent(?:age)?\b"), "%"),
    (re.compile(_NUMBER + r"\s*dollars?\s+off\b"), " dollars off"),
    (re.compile(_WORD + r"\s+percent(?:age)?\b"), "%"),
    (re.compile(_WORD + r"\s+dollars?\s+off\b"), " dollars off"),
]


def detect_discount(text: str) -> bool:
    """True when the text affirms a discount and does not negate one."""
    text = _clean(text)
    return bool(AFFIRMATIVE.search(text)) and not NEGATED.search(text)


def extract_amount(text: str) -> str | None:
    """Return the first discount amount mentioned, e.g. "15%" or "10 dollars off"."""
    text = _clean(text)
    for pattern, suffix in AMOUNT_PATTERNS:
        match = pattern.search(text)
        if match:
            value = match.group(1)
            value = str(WRITTEN_NUMBERS.get(value, value))
            return f"{value}{suffix}"
    return None


def _clean(text: str) -> str:
    return (text or "").lower().replace("\u2019", "'")


class PatternClassifier(ResponseClassifier):
    """Classify transcripts with keyword and number patterns."""

    name = "pattern"

    async def classify(self, transcript: str, context: TurnContext) -> ClassificationResult:
        return self.classify_text(transcript)

    def classify_text(self, transcript: str) -> ClassificationResult:
        has_discount = detect_discount(transcript)
        amount = extract_amount(transcript)

        logger.debug(
            "Pattern classification",
            has_discount=has_discount,
            discount_amount=amount,
        )

        return ClassificationResult(
            has_discount=has_discount,
            discount_amount=amount,
            discount_details=transcript.strip(),
            should_end_call=True,
            end_reason=(
                EndReason.GOT_COMPLETE_INFO if has_discount else EndReason.NO_DISCOUNT_CONFIRMED
            ),
        )
