"""
API routes for the business list: CSV upload, listing, export and clearing.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, UploadFile, File
from pydantic import BaseModel

from app.api.dependencies import get_business_repository
from app.api.middleware.auth import get_current_user
from app.db.repository import BusinessRepository
from app.ingest import MAX_UPLOAD_BYTES, businesses_to_csv, parse_csv
from app.models.business import Business

logger = structlog.get_logger()

router = APIRouter(tags=["businesses"])


# ══════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════


class UploadResponse(BaseModel):
    """Result of a CSV upload."""

    message: str
    recordsProcessed: int
    skipped: int
    errors: list[str]


class ClearResponse(BaseModel):
    message: str
    deleted: int


# ══════════════════════════════════════════════════════════
# Endpoints
# ══════════════════════════════════════════════════════════


@router.post("/upload-csv", response_model=UploadResponse)
async def upload_csv(
    file: UploadFile | None = File(default=None),
    repository: BusinessRepository = Depends(get_business_repository),
    user_id: str = Depends(get_current_user),
) -> UploadResponse:
    """
    Import businesses from a CSV file.

    Invalid rows are reported as "Row N: ..." and skipped; valid rows are
    inserted and phones already on file are skipped.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="File must be a CSV")

    content = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File exceeds the 5MB limit")

    try:
        parsed = parse_csv(content.decode("utf-8"))
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    inserted = repository.create_many(parsed.records)
    skipped = parsed.duplicates + len(parsed.records) - len(inserted)

    logger.info(
        "CSV upload processed",
        user_id=user_id,
        filename=file.filename,
        inserted=len(inserted),
        skipped=skipped,
        invalid=len(parsed.errors),
    )

    return UploadResponse(
        message="Upload successful" if not parsed.errors else "Upload completed with errors",
        recordsProcessed=len(inserted),
        skipped=skipped,
        errors=parsed.errors,
    )


@router.get("/businesses", response_model=list[Business])
async def list_businesses(
    repository: BusinessRepository = Depends(get_business_repository),
    user_id: str = Depends(get_current_user),
) -> list[dict]:
    """List every business ordered by name."""
    return repository.list_all()


@router.get("/export-csv")
async def export_csv(
    repository: BusinessRepository = Depends(get_business_repository),
    user_id: str = Depends(get_current_user),
) -> Response:
    """Download every business as businesses.csv."""
    content = businesses_to_csv(repository.list_all())
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=businesses.csv"},
    )


@router.delete("/clear-database", response_model=ClearResponse)
async def clear_database(
    repository: BusinessRepository = Depends(get_business_repository),
    user_id: str = Depends(get_current_user),
) -> ClearResponse:
    """Delete every business record."""
    deleted = repository.delete_all()
    logger.info("Database cleared", user_id=user_id, deleted=deleted)
    return ClearResponse(message="Database cleared successfully", deleted=deleted)
