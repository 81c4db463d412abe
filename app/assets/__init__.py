"""Call audio hosted on Supabase Storage."""

from app.assets.store import (
    RecordingStore,
    RecordingStoreError,
    UnsupportedAudioError,
    content_type_for,
)

__all__ = [
    "RecordingStore",
    "RecordingStoreError",
    "UnsupportedAudioError",
    "content_type_for",
]
