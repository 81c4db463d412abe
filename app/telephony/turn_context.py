"""
Turn context carried between webhook invocations.

Twilio calls the webhook once per conversation turn and nothing is kept in
process between turns. Everything the next turn needs is serialised into the
query string of the URL the current turn hands back to Twilio.
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping
from urllib.parse import urlencode

from app.telephony.phone import normalize_phone


@dataclass(frozen=True)
class TurnContext:
    """Correlation key plus counters for one turn of a call."""

    phone: str
    turn: int = 0
    retries: int = 0

    @property
    def is_first_turn(self) -> bool:
        return self.turn == 0 and self.retries == 0

    def next_turn(self) -> "TurnContext":
        """Context for the turn after a transcribed answer. Resets retries."""
        return replace(self, turn=self.turn + 1, retries=0)

    def retry(self) -> "TurnContext":
        """Context for re-asking after an empty transcript."""
        return replace(self, turn=self.turn + 1, retries=self.retries + 1)

    def to_query(self) -> dict[str, str]:
        return {
            "phone": self.phone,
            "turn": str(self.turn),
            "retries": str(self.retries),
        }

    def to_url(self, base_url: str, path: str = "/api/call-handler") -> str:
        return f"{base_url.rstrip('/')}{path}?{urlencode(self.to_query())}"

    @classmethod
    def from_request(
        cls,
        query: Mapping[str, Any],
        form: Mapping[str, Any] | None = None,
    ) -> "TurnContext":
        """
        Rebuild the context from an inbound webhook.

        The phone comes from the query string when the previous turn set it,
        otherwise from the dialled number Twilio posts ("To" / "Called").
        Malformed counters fall back to zero.
        """
        form = form or {}
        phone = query.get("phone") or form.get("To") or form.get("Called") or ""

        return cls(
            phone=normalize_phone(str(phone)),
            turn=_as_count(query.get("turn")),
            retries=_as_count(query.get("retries")),
        )


def _as_count(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0
