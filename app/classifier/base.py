"""
Shared contract for response classifiers.

A classifier turns the transcript of the business's last utterance into
discount fields plus a decision on whether the call should end.
"""

from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel, Field

from app.telephony.turn_context import TurnContext


class EndReason(str, Enum):
    """Why the conversation ended (or that it should continue)."""

    GOT_COMPLETE_INFO = "got_complete_info"
    NO_DISCOUNT_CONFIRMED = "no_discount_confirmed"
    NOT_INTERESTED = "not_interested"
    MAX_ATTEMPTS_REACHED = "max_attempts_reached"
    UNCLEAR_RESPONSE = "unclear_response"
    CONTINUE = "continue"


class ClassificationResult(BaseModel):
    """Structured interpretation of one transcript."""

    has_discount: bool
    discount_amount: str | None = None
    discount_details: str = ""
    should_end_call: bool
    availability_info: str | None = None
    eligibility_info: str | None = None
    next_response: str | None = Field(
        default=None, description="What to say next; None means use the default closing"
    )
    end_reason: EndReason | None = None

    def discount_fields(self) -> dict:
        """Fields persisted on the business record when the call completes."""
        fields = {
            "has_discount": self.has_discount,
            "discount_amount": self.discount_amount,
            "discount_details": self.discount_details,
        }
        if self.availability_info is not None:
            fields["availability_info"] = self.availability_info
        if self.eligibility_info is not None:
            fields["eligibility_info"] = self.eligibility_info
        return fields


class ClassificationError(Exception):
    """Raised when a transcript could not be classified."""


class ResponseClassifier(ABC):
    """Strategy interface implemented by every classifier."""

    name: str = ""

    @abstractmethod
    async def classify(self, transcript: str, context: TurnContext) -> ClassificationResult:
        """
        Classify a non-empty transcript.

        Raises:
            ClassificationError: If the transcript could not be interpreted
        """
