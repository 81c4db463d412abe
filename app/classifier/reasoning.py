"""
Reasoning-service response classifier.

Sends the instruction profile plus the latest transcript to OpenAI and reads
back a fixed JSON shape. Any failure (network, refusal, malformed JSON,
missing field) is raised as ClassificationError; there is no silent default.
"""

import structlog
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.classifier.base import (
    ClassificationError,
    ClassificationResult,
    EndReason,
    ResponseClassifier,
)
from app.classifier.prompts import SYSTEM_PROMPT, build_turn_input
from app.classifier.schema import RESPONSE_FORMAT
from app.telephony.turn_context import TurnContext

logger = structlog.get_logger()


class ServiceAnswer(BaseModel):
    """The JSON object returned by the reasoning service."""

    model_config = ConfigDict(populate_by_name=True)

    has_discount: bool = Field(alias="hasDiscount")
    discount_amount: str | None = Field(default=None, alias="discountAmount")
    discount_details: str = Field(default="", alias="discountDetails")
    availability_info: str | None = Field(default=None, alias="availabilityInfo")
    eligibility_info: str | None = Field(default=None, alias="eligibilityInfo")
    next_response: str = Field(alias="nextResponse")
    should_end_call: bool = Field(alias="shouldEndCall")
    end_reason: EndReason | None = Field(default=None, alias="endReason")

    def to_result(self) -> ClassificationResult:
        return ClassificationResult(
            has_discount=self.has_discount,
            discount_amount=self.discount_amount or None,
            discount_details=self.discount_details,
            should_end_call=self.should_end_call,
            availability_info=self.availability_info or None,
            eligibility_info=self.eligibility_info or None,
            next_response=self.next_response,
            end_reason=self.end_reason,
        )


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    text = text.strip()
    if not text.startswith("```"):
        return text

    lines = text.split("\n")
    json_lines = []
    in_block = False
    for line in lines:
        if line.startswith("```"):
            in_block = not in_block
            continue
        if in_block:
            json_lines.append(line)
    return "\n".join(json_lines)


class ReasoningClassifier(ResponseClassifier):
    """Classify transcripts and plan the next line with an LLM."""

    name = "reasoning"

    def __init__(
        self,
        api_key: str = "",
        model: str = "gpt-4o-mini",
        max_turns: int = 6,
        client: AsyncOpenAI | None = None,
    ):
        self.client = client or AsyncOpenAI(api_key=api_key or None)
        self.model = model
        self.max_turns = max_turns

    async def classify(self, transcript: str, context: TurnContext) -> ClassificationResult:
        turn_input = build_turn_input(transcript, context.turn, self.max_turns)

        try:
            response = await self.client.responses.create(
                model=self.model,
                instructions=SYSTEM_PROMPT,
                input=turn_input,
                text={"format": RESPONSE_FORMAT},
            )
        except OpenAIError as e:
            logger.error("Reasoning service call failed", phone=context.phone, error=str(e))
            raise ClassificationError(f"Reasoning service call failed: {e}") from e

        output_text = strip_code_fence(response.output_text or "")
        if not output_text:
            raise ClassificationError("Reasoning service returned no output")

        try:
            answer = ServiceAnswer.model_validate_json(output_text)
        except ValidationError as e:
            logger.error(
                "Malformed reasoning service output",
                phone=context.phone,
                output=output_text,
                error=str(e),
            )
            raise ClassificationError(f"Malformed reasoning service output: {e}") from e

        logger.info(
            "Reasoning classification",
            phone=context.phone,
            turn=context.turn,
            has_discount=answer.has_discount,
            should_end_call=answer.should_end_call,
            end_reason=answer.end_reason.value if answer.end_reason else None,
        )
        return answer.to_result()
