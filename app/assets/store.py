"""
Recording store for call audio.

Audio files (uploaded recordings or speech generated with OpenAI TTS) live
in a Supabase Storage bucket and are played to callees by URL.
"""

from uuid import uuid4

import structlog
from openai import AsyncOpenAI, OpenAIError

from app.db.supabase import get_recordings_bucket

logger = structlog.get_logger()

AUDIO_CONTENT_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
}


class RecordingStoreError(Exception):
    """Raised when the object store or speech synthesis fails."""


class UnsupportedAudioError(RecordingStoreError):
    """The file is not an audio type Twilio can <Play>."""


def content_type_for(filename: str) -> str:
    """Content type for an audio file name, or raise if it is not supported."""
    for extension, content_type in AUDIO_CONTENT_TYPES.items():
        if filename.lower().endswith(extension):
            return content_type
    raise UnsupportedAudioError(
        f"Unsupported audio file: {filename} (expected {', '.join(AUDIO_CONTENT_TYPES)})"
    )


class RecordingStore:
    """Upload, list and delete call audio."""

    def __init__(self, bucket=None, openai_client: AsyncOpenAI | None = None):
        self.bucket = bucket if bucket is not None else get_recordings_bucket()
        self.openai_client = openai_client

    def upload(self, data: bytes, filename: str | None = None) -> dict:
        """
        Store an audio file.

        Returns:
            {"name": ..., "url": ...} with the public URL to <Play>
        """
        name = filename or f"{uuid4()}.mp3"
        content_type = content_type_for(name)

        try:
            self.bucket.upload(
                name,
                data,
                file_options={"content-type": content_type, "upsert": "true"},
            )
        except Exception as e:
            logger.error("Recording upload failed", name=name, error=str(e))
            raise RecordingStoreError(f"Failed to upload recording: {e}") from e

        url = self.bucket.get_public_url(name)
        logger.info("Uploaded recording", name=name, size=len(data))
        return {"name": name, "url": url}

    def list_all(self) -> list[dict]:
        """List stored recordings with their public URLs."""
        try:
            files = self.bucket.list()
        except Exception as e:
            logger.error("Listing recordings failed", error=str(e))
            raise RecordingStoreError(f"Failed to list recordings: {e}") from e

        return [
            {
                "name": f["name"],
                "url": self.bucket.get_public_url(f["name"]),
                "updated_at": f.get("updated_at"),
            }
            for f in files
            if f.get("name")
        ]

    def delete(self, name: str) -> bool:
        """
        Delete a recording.

        Returns:
            False if no recording with that name existed
        """
        try:
            removed = self.bucket.remove([name])
        except Exception as e:
            logger.error("Deleting recording failed", name=name, error=str(e))
            raise RecordingStoreError(f"Failed to delete recording: {e}") from e

        logger.info("Deleted recording", name=name, found=bool(removed))
        return bool(removed)

    async def synthesize(self, text: str, model: str, voice: str, filename: str | None = None) -> dict:
        """Generate speech for `text` with OpenAI TTS and store it as mp3."""
        if self.openai_client is None:
            raise RecordingStoreError("Speech synthesis is not configured")

        try:
            speech = await self.openai_client.audio.speech.create(
                model=model,
                voice=voice,
                input=text,
                response_format="mp3",
            )
        except OpenAIError as e:
            logger.error("Speech synthesis failed", error=str(e))
            raise RecordingStoreError(f"Speech synthesis failed: {e}") from e

        return self.upload(speech.content, filename)
