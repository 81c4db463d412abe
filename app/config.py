from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    port: int = 8000
    debug: bool = False

    # Supabase
    supabase_url: str
    supabase_service_key: str
    supabase_jwt_secret: str = ""
    recordings_bucket: str = "recordings"

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_tts_model: str = "gpt-4o-mini-tts"
    openai_tts_voice: str = "alloy"

    # Which response classifier drives the conversation
    classifier_strategy: Literal["pattern", "reasoning"] = "pattern"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
