"""Phone number canonicalisation shared by CSV ingest and webhook lookup."""

import re

_NON_DIGITS = re.compile(r"\D")
_CANONICAL = re.compile(r"^\+\d{11,}$")


def normalize_phone(raw: str) -> str:
    """
    Canonicalise a free-form phone number to "+<digits>".

    10 digits are treated as a US number and get the "1" country code.
    Anything else keeps its digits as-is. Never raises.

    Examples:
        "(555) 123-4567"  -> "+15551234567"
        "1-555-123-4567"  -> "+15551234567"
        "+44 20 7946 0958" -> "+442079460958"
    """
    digits = _NON_DIGITS.sub("", raw or "")

    if len(digits) == 10:
        return f"+1{digits}"
    return f"+{digits}"


def is_valid_phone(raw: str) -> bool:
    """True when the normalised form is "+" followed by at least 11 digits."""
    return bool(_CANONICAL.match(normalize_phone(raw)))
