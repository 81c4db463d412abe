"""
Supabase client for the record store and the recordings bucket.

Uses the service key: the webhook and bulk caller run without a user
session, so row-level security is bypassed server-side.
"""

from supabase import create_client, Client
from app.config import get_settings
import structlog

logger = structlog.get_logger()

_supabase_client: Client | None = None


def init_supabase() -> Client:
    global _supabase_client
    settings = get_settings()
    _supabase_client = create_client(settings.supabase_url, settings.supabase_service_key)
    logger.info("Supabase client initialized", url=settings.supabase_url)
    return _supabase_client


def get_supabase() -> Client:
    if _supabase_client is None:
        return init_supabase()
    return _supabase_client


def get_recordings_bucket(client: Client | None = None):
    """Storage bucket holding greeting and prompt audio."""
    client = client or get_supabase()
    return client.storage.from_(get_settings().recordings_bucket)
