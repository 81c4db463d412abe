"""
Shared fixtures: in-memory stand-ins for Supabase, Twilio and the classifier.

Nothing here talks to the network.
"""

import os
from datetime import datetime, timezone
from uuid import uuid4

import pytest

# Settings are read lazily from the environment; give them harmless values.
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("TWILIO_ACCOUNT_SID", "ACtest")
os.environ.setdefault("TWILIO_AUTH_TOKEN", "test-auth-token")
os.environ.setdefault("TWILIO_PHONE_NUMBER", "+15550000000")
os.environ.setdefault("PUBLIC_BASE_URL", "https://calls.example.com")

from app.classifier.base import ClassificationResult, ResponseClassifier  # noqa: E402
from app.models.business import BusinessCreate, CallStatus  # noqa: E402
from app.telephony.config import TwilioConfig  # noqa: E402


class FakeBusinessRepository:
    """In-memory BusinessRepository."""

    def __init__(self, businesses: list[dict] | None = None):
        self.rows: dict[str, dict] = {}
        self.status_updates: list[tuple[str, CallStatus]] = []
        self.results: list[tuple[str, ClassificationResult]] = []
        for business in businesses or []:
            self.add(**business)

    def add(self, name: str, phone: str, **fields) -> dict:
        row = {
            "id": fields.pop("id", str(uuid4())),
            "name": name,
            "phone": phone,
            "has_discount": False,
            "discount_amount": None,
            "discount_details": None,
            "availability_info": None,
            "eligibility_info": None,
            "call_status": CallStatus.PENDING.value,
            "last_called": None,
            **fields,
        }
        self.rows[row["id"]] = row
        return row

    def list_all(self) -> list[dict]:
        return sorted(self.rows.values(), key=lambda r: r["name"])

    def get(self, business_id: str) -> dict | None:
        return self.rows.get(business_id)

    def get_by_phone(self, phone: str) -> dict | None:
        return next((r for r in self.rows.values() if r["phone"] == phone), None)

    def create_many(self, businesses: list[BusinessCreate]) -> list[dict]:
        inserted = []
        for business in businesses:
            if self.get_by_phone(business.phone):
                continue
            inserted.append(self.add(**business.to_row()))
        return inserted

    def delete_all(self) -> int:
        count = len(self.rows)
        self.rows.clear()
        return count

    def update(self, business_id: str, **kwargs) -> dict | None:
        row = self.rows.get(business_id)
        if row is None:
            return None
        row.update(kwargs)
        return row

    def update_call_status(self, business_id: str, status: CallStatus) -> dict | None:
        self.status_updates.append((business_id, status))
        return self.update(business_id, call_status=status.value)

    def record_call_result(self, business_id: str, result: ClassificationResult) -> dict | None:
        self.results.append((business_id, result))
        return self.update(
            business_id,
            **result.discount_fields(),
            last_called=datetime.now(timezone.utc).isoformat(),
            call_status=CallStatus.COMPLETED.value,
        )


class ScriptedClassifier(ResponseClassifier):
    """Returns queued results (or raises queued exceptions) in order."""

    name = "scripted"

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, object]] = []

    async def classify(self, transcript, context):
        self.calls.append((transcript, context))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeCall:
    def __init__(self, sid: str):
        self.sid = sid


class FakeCalls:
    """Stands in for twilio Client.calls; fails for numbers in `failing`."""

    def __init__(self, failing: set[str] | None = None):
        self.failing = failing or set()
        self.created: list[dict] = []

    def create(self, **kwargs):
        self.created.append(kwargs)
        if kwargs["to"] in self.failing:
            raise RuntimeError(f"Twilio rejected {kwargs['to']}")
        return FakeCall(f"CA{len(self.created):032d}")


class FakeTwilioClient:
    def __init__(self, failing: set[str] | None = None):
        self.calls = FakeCalls(failing)


@pytest.fixture
def twilio_config() -> TwilioConfig:
    return TwilioConfig(
        twilio_account_sid="ACtest",
        twilio_auth_token="test-auth-token",
        twilio_phone_number="+15550000000",
        public_base_url="https://calls.example.com",
        validate_webhook_signatures=False,
    )


@pytest.fixture
def repository() -> FakeBusinessRepository:
    return FakeBusinessRepository(
        [
            {"id": "biz-1", "name": "Joe's Diner", "phone": "+15551234567"},
            {"id": "biz-2", "name": "Main Street Hardware", "phone": "+15557654321"},
        ]
    )
