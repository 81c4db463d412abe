"""
Twilio configuration for outbound discount survey calls.

Requires environment variables:
- TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN: API credentials
- TWILIO_PHONE_NUMBER: Caller id used for every outbound call
- PUBLIC_BASE_URL: Public URL Twilio uses to reach the call-handler webhook
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class TwilioConfig(BaseSettings):
    """Configuration for the Twilio voice integration."""

    # Required credentials
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_phone_number: str

    # Webhook settings
    public_base_url: str
    validate_webhook_signatures: bool = True

    # Conversation settings
    gather_timeout_seconds: int = 5  # silence before Twilio gives up listening
    max_empty_retries: int = 2
    max_turns: int = 6
    tts_voice: str = "Polly.Joanna"
    greeting_audio_url: str = ""  # played instead of the spoken greeting when set

    # Bulk calling
    max_concurrent_calls: int = 10

    class Config:
        env_prefix = ""
        case_sensitive = False
        env_file = ".env"
        extra = "ignore"


@lru_cache(maxsize=1)
def get_twilio_config() -> TwilioConfig:
    """Get cached Twilio configuration from environment."""
    return TwilioConfig()


def validate_twilio_config() -> bool:
    """Validate that all required Twilio config is present."""
    try:
        config = get_twilio_config()
    except ValueError:
        return False
    return bool(
        config.twilio_account_sid
        and config.twilio_auth_token
        and config.twilio_phone_number
        and config.public_base_url
    )
