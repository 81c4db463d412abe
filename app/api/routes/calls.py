"""
API routes for outbound call placement.

Conversations run asynchronously through the call-handler webhook; these
endpoints only report whether the calls were placed.
"""

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.dependencies import get_call_service
from app.api.middleware.auth import get_current_user
from app.telephony.service import TwilioService

logger = structlog.get_logger()

router = APIRouter(tags=["calls"])


class CallAllRequest(BaseModel):
    """Optional tuning for a bulk run."""

    max_concurrent: int | None = None


class BatchResponse(BaseModel):
    """Response for a bulk call run."""

    message: str
    batch_id: str
    total: int
    successful: int
    failed: int


@router.post("/call-all", response_model=BatchResponse)
async def call_all(
    request: CallAllRequest | None = None,
    service: TwilioService = Depends(get_call_service),
    user_id: str = Depends(get_current_user),
) -> BatchResponse:
    """Place one call to every business on file."""
    max_concurrent = request.max_concurrent if request else None
    result = await service.call_all(max_concurrent=max_concurrent)

    logger.info(
        "Bulk calls triggered",
        user_id=user_id,
        batch_id=result.batch_id,
        total=result.total,
    )

    return BatchResponse(
        message=result.message,
        batch_id=result.batch_id,
        total=result.total,
        successful=result.successful,
        failed=result.failed,
    )
