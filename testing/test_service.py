"""Outbound call placement and the bulk caller."""

import asyncio
from urllib.parse import parse_qs, urlparse

import pytest

from app.models.business import CallStatus
from app.telephony.service import TwilioService
from testing.conftest import FakeBusinessRepository, FakeTwilioClient


def make_repository(count: int) -> FakeBusinessRepository:
    return FakeBusinessRepository(
        [
            {"id": f"biz-{i}", "name": f"Business {i:02d}", "phone": f"+1555000{i:04d}"}
            for i in range(count)
        ]
    )


def test_place_call_uses_caller_id_and_webhook(twilio_config, repository):
    client = FakeTwilioClient()
    service = TwilioService(config=twilio_config, client=client, repository=repository)

    sid = asyncio.run(service.place_call(repository.get("biz-1")))

    assert sid.startswith("CA")
    created = client.calls.created[0]
    assert created["to"] == "+15551234567"
    assert created["from_"] == "+15550000000"

    url = urlparse(created["url"])
    assert url.netloc == "calls.example.com"
    assert url.path == "/api/call-handler"
    assert parse_qs(url.query) == {"phone": ["+15551234567"], "turn": ["0"], "retries": ["0"]}

    assert repository.get("biz-1")["call_status"] == CallStatus.CALLING.value


@pytest.mark.parametrize("total,failures", [(5, 0), (5, 2), (4, 4), (0, 0)])
def test_call_all_tallies_placements(twilio_config, total, failures):
    repository = make_repository(total)
    failing = {f"+1555000{i:04d}" for i in range(failures)}
    service = TwilioService(config=twilio_config, client=FakeTwilioClient(failing), repository=repository)

    result = asyncio.run(service.call_all(max_concurrent=2))

    assert result.total == total
    assert result.successful == total - failures
    assert result.failed == failures
    assert result.message == f"Calls initiated: {total - failures} successful, {failures} failed"


def test_failed_placement_keeps_calling_status(twilio_config):
    repository = make_repository(3)
    service = TwilioService(
        config=twilio_config,
        client=FakeTwilioClient({"+15550000001"}),
        repository=repository,
    )

    asyncio.run(service.call_all())

    statuses = {row["id"]: row["call_status"] for row in repository.list_all()}
    assert statuses == {
        "biz-0": CallStatus.CALLING.value,
        "biz-1": CallStatus.CALLING.value,
        "biz-2": CallStatus.CALLING.value,
    }


def test_status_update_failure_is_isolated(twilio_config):
    repository = make_repository(3)
    original = repository.update_call_status

    def flaky(business_id, status):
        if business_id == "biz-2":
            raise ConnectionError("database unavailable")
        return original(business_id, status)

    repository.update_call_status = flaky
    client = FakeTwilioClient()
    service = TwilioService(config=twilio_config, client=client, repository=repository)

    result = asyncio.run(service.call_all())

    assert (result.successful, result.failed) == (2, 1)
    assert sorted(c["to"] for c in client.calls.created) == ["+15550000000", "+15550000001"]
