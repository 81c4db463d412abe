"""
Twilio service for outbound discount survey calls.

Places calls through the Twilio REST API. Each placed call fetches its
first TwiML from the call-handler webhook; everything after placement is
driven by the webhook turns.
"""

import asyncio
from dataclasses import dataclass
from uuid import uuid4

import structlog
from twilio.rest import Client

from app.db.repository import BusinessRepository
from app.models.business import CallStatus
from app.telephony.config import TwilioConfig, get_twilio_config
from app.telephony.turn_context import TurnContext

logger = structlog.get_logger()


@dataclass
class BatchCallResult:
    """Tally of a bulk placement run."""

    batch_id: str
    total: int
    successful: int
    failed: int

    @property
    def message(self) -> str:
        return f"Calls initiated: {self.successful} successful, {self.failed} failed"


class TwilioService:
    """Service for placing Twilio voice calls."""

    def __init__(
        self,
        config: TwilioConfig | None = None,
        client: Client | None = None,
        repository: BusinessRepository | None = None,
    ):
        self.config = config or get_twilio_config()
        self.client = client or Client(
            self.config.twilio_account_sid,
            self.config.twilio_auth_token,
        )
        self.repository = repository or BusinessRepository()

    async def place_call(self, business: dict) -> str:
        """
        Mark a business as being called and place one outbound call.

        Args:
            business: A businesses row (needs "id" and "phone")

        Returns:
            The Twilio call SID

        Raises:
            twilio.base.exceptions.TwilioRestException: If Twilio rejects the call
        """
        context = TurnContext(phone=business["phone"])

        self.repository.update_call_status(business["id"], CallStatus.CALLING)

        logger.info("Placing call", business_id=business["id"], phone=business["phone"])

        # The REST client is blocking; keep the event loop free for the other placements.
        call = await asyncio.to_thread(
            self.client.calls.create,
            to=business["phone"],
            from_=self.config.twilio_phone_number,
            url=context.to_url(self.config.public_base_url),
            method="POST",
        )

        logger.info("Call placed", business_id=business["id"], call_sid=call.sid)
        return call.sid

    async def call_all(self, max_concurrent: int | None = None) -> BatchCallResult:
        """
        Place one call per business and wait for every placement to settle.

        Placements are independent: a failure is counted and does not touch
        the other businesses or roll back the "calling" status.
        """
        businesses = self.repository.list_all()
        batch_id = str(uuid4())
        max_concurrent = max_concurrent or self.config.max_concurrent_calls

        logger.info(
            "Starting batch calls",
            batch_id=batch_id,
            total_calls=len(businesses),
            max_concurrent=max_concurrent,
        )

        semaphore = asyncio.Semaphore(max_concurrent)

        async def call_with_semaphore(business: dict) -> bool:
            async with semaphore:
                try:
                    await self.place_call(business)
                    return True
                except Exception as e:
                    logger.error(
                        "Call placement failed",
                        batch_id=batch_id,
                        business_id=business.get("id"),
                        phone=business.get("phone"),
                        error=str(e),
                    )
                    return False

        results = await asyncio.gather(*[call_with_semaphore(b) for b in businesses])

        successful = sum(1 for placed in results if placed)
        result = BatchCallResult(
            batch_id=batch_id,
            total=len(businesses),
            successful=successful,
            failed=len(businesses) - successful,
        )

        logger.info(
            "Batch calls completed",
            batch_id=batch_id,
            successful=result.successful,
            failed=result.failed,
        )
        return result


# Singleton instance
_twilio_service: TwilioService | None = None


def get_twilio_service() -> TwilioService:
    """Get or create the TwilioService singleton."""
    global _twilio_service
    if _twilio_service is None:
        _twilio_service = TwilioService()
    return _twilio_service
