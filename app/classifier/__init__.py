"""
Response classifiers.

Turn a call transcript into discount fields and a continue/end decision.
Two interchangeable strategies are selected by configuration:
- pattern: keyword and number scan, no external calls
- reasoning: OpenAI structured output, can hold a multi-turn conversation
"""

from app.classifier.base import (
    ClassificationError,
    ClassificationResult,
    EndReason,
    ResponseClassifier,
)
from app.classifier.pattern import PatternClassifier
from app.classifier.reasoning import ReasoningClassifier


def get_classifier(strategy: str, **kwargs) -> ResponseClassifier:
    """
    Build the classifier named by `strategy`.

    Args:
        strategy: "pattern" or "reasoning"
        **kwargs: ReasoningClassifier options (api_key, model, max_turns);
            ignored by the pattern strategy

    Raises:
        ValueError: If the strategy is unknown
    """
    if strategy == "pattern":
        return PatternClassifier()
    if strategy == "reasoning":
        return ReasoningClassifier(**kwargs)
    raise ValueError(f"Unknown classifier strategy: {strategy}")


__all__ = [
    "ClassificationError",
    "ClassificationResult",
    "EndReason",
    "ResponseClassifier",
    "PatternClassifier",
    "ReasoningClassifier",
    "get_classifier",
]
