"""
Twilio voice integration for the discount survey calls.

The call-turn handler lives in app.telephony.orchestrator and the outbound
call placement in app.telephony.service; they are imported from there
directly since both depend on the classifier package.
"""

from app.telephony.config import TwilioConfig, get_twilio_config, validate_twilio_config
from app.telephony.phone import is_valid_phone, normalize_phone
from app.telephony.turn_context import TurnContext

__all__ = [
    # Config
    "TwilioConfig",
    "get_twilio_config",
    "validate_twilio_config",
    # Phone numbers
    "normalize_phone",
    "is_valid_phone",
    # Turn context
    "TurnContext",
]
