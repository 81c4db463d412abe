"""
Repository layer for database operations.

Provides CRUD operations over the businesses table.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import structlog
from supabase import Client

from app.classifier.base import ClassificationResult
from app.db.supabase import get_supabase
from app.models.business import BusinessCreate, CallStatus

logger = structlog.get_logger()


class BaseRepository:
    """Base repository with common operations."""

    table_name: str = ""

    def __init__(self, client: Client | None = None):
        self.client = client or get_supabase()

    def _table(self):
        return self.client.table(self.table_name)


class BusinessRepository(BaseRepository):
    """Repository for businesses table."""

    table_name = "businesses"

    def list_all(self) -> list[dict]:
        """List all businesses ordered by name."""
        result = self._table().select("*").order("name").execute()
        return result.data

    def get(self, business_id: str | UUID) -> dict | None:
        """Get a business by ID."""
        result = self._table().select("*").eq("id", str(business_id)).execute()
        return result.data[0] if result.data else None

    def get_by_phone(self, phone: str) -> dict | None:
        """Get a business by its canonical phone number."""
        result = self._table().select("*").eq("phone", phone).limit(1).execute()
        return result.data[0] if result.data else None

    def create_many(self, businesses: list[BusinessCreate]) -> list[dict]:
        """
        Batch insert businesses, skipping phones that already exist.

        Returns only the rows that were actually inserted.
        """
        data = [b.to_row() for b in businesses]
        if not data:
            return []
        result = (
            self._table()
            .upsert(data, on_conflict="phone", ignore_duplicates=True)
            .execute()
        )
        logger.info("Created businesses", requested=len(data), inserted=len(result.data))
        return result.data

    def delete_all(self) -> int:
        """Delete every business. Returns the number of deleted rows."""
        result = self._table().delete().neq("id", "00000000-0000-0000-0000-000000000000").execute()
        logger.info("Cleared businesses", count=len(result.data))
        return len(result.data)

    def update(self, business_id: str | UUID, **kwargs) -> dict | None:
        """Update a business."""
        result = self._table().update(kwargs).eq("id", str(business_id)).execute()
        return result.data[0] if result.data else None

    def update_call_status(self, business_id: str | UUID, status: CallStatus) -> dict | None:
        """Update only the call status."""
        return self.update(business_id, call_status=status.value)

    def record_call_result(
        self,
        business_id: str | UUID,
        result: ClassificationResult,
    ) -> dict | None:
        """Persist the outcome of a completed call."""
        data: dict[str, Any] = {
            **result.discount_fields(),
            "last_called": datetime.now(timezone.utc).isoformat(),
            "call_status": CallStatus.COMPLETED.value,
        }
        updated = self.update(business_id, **data)
        logger.info(
            "Recorded call result",
            business_id=str(business_id),
            has_discount=result.has_discount,
            discount_amount=result.discount_amount,
        )
        return updated
