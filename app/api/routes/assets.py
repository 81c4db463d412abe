"""
API routes for call audio: upload, list, delete and speech generation.
"""

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from app.api.dependencies import get_recording_store
from app.api.middleware.auth import get_current_user
from app.assets.store import RecordingStore, RecordingStoreError, UnsupportedAudioError
from app.config import get_settings
from app.ingest import MAX_UPLOAD_BYTES

logger = structlog.get_logger()

router = APIRouter(tags=["assets"])


class GenerateRequest(BaseModel):
    """Text to synthesise into a playable recording."""

    text: str = Field(min_length=1, max_length=2000)
    filename: str | None = None


@router.post("/upload-recording")
async def upload_recording(
    file: UploadFile | None = File(default=None),
    store: RecordingStore = Depends(get_recording_store),
    user_id: str = Depends(get_current_user),
) -> dict:
    """Upload an mp3/wav recording to play during calls."""
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File exceeds the 5MB limit")

    try:
        asset = store.upload(data, file.filename)
    except UnsupportedAudioError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecordingStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"message": "Recording uploaded successfully", **asset}


@router.get("/assets")
async def list_assets(
    store: RecordingStore = Depends(get_recording_store),
    user_id: str = Depends(get_current_user),
) -> list[dict]:
    """List stored recordings."""
    try:
        return store.list_all()
    except RecordingStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/assets/{name}")
async def delete_asset(
    name: str,
    store: RecordingStore = Depends(get_recording_store),
    user_id: str = Depends(get_current_user),
) -> dict:
    """Delete a stored recording."""
    try:
        found = store.delete(name)
    except RecordingStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not found:
        raise HTTPException(status_code=404, detail="Asset not found")
    return {"message": "Asset deleted successfully"}


@router.post("/assets/generate")
async def generate_asset(
    request: GenerateRequest,
    store: RecordingStore = Depends(get_recording_store),
    user_id: str = Depends(get_current_user),
) -> dict:
    """Synthesise speech with OpenAI TTS and store it as a recording."""
    settings = get_settings()
    try:
        asset = await store.synthesize(
            request.text,
            model=settings.openai_tts_model,
            voice=settings.openai_tts_voice,
            filename=request.filename,
        )
    except RecordingStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    logger.info("Generated recording", user_id=user_id, name=asset["name"])
    return {"message": "Recording generated successfully", **asset}
