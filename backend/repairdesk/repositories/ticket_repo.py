"""Ticket Repository - Data access for repair tickets"""
from typing import Any, Dict, Optional
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from .async_mongo import get_async_collection
from ..domain.models import TicketSnapshot
from ..domain.enums import TicketStatus
from ..domain.errors import TicketNotFoundError, ConcurrencyError
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class TicketRepository:
    """Repository for ticket status reads and writes"""

    COLLECTION_NAME = "tickets"

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None):
        self._collection = collection if collection is not None else get_async_collection(self.COLLECTION_NAME)

    async def get_ticket(self, ticket_id: str) -> Optional[TicketSnapshot]:
        """Get ticket by ID"""
        doc = await self._collection.find_one({"ticket_id": ticket_id})
        if doc:
            doc.pop("_id", None)
            return TicketSnapshot.model_validate(doc)
        return None

    async def get_ticket_or_raise(self, ticket_id: str) -> TicketSnapshot:
        """Get ticket or raise TicketNotFoundError"""
        ticket = await self.get_ticket(ticket_id)
        if not ticket:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found", details={"ticket_id": ticket_id})
        return ticket

    async def update_status(
        self,
        ticket_id: str,
        from_status: TicketStatus,
        to_status: TicketStatus,
        expected_version: int
    ) -> TicketSnapshot:
        """
        Move a ticket to a new status with optimistic concurrency

        The write only applies if the ticket is still in from_status at
        expected_version; otherwise ConcurrencyError is raised.
        """
        now = utc_now()
        updates: Dict[str, Any] = {
            "status": to_status.value,
            "version": expected_version + 1,
            "updated_at": now
        }
        if to_status == TicketStatus.COMPLETED:
            updates["completed_at"] = now

        doc = await self._collection.find_one_and_update(
            {"ticket_id": ticket_id, "status": from_status.value, "version": expected_version},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )

        if doc is None:
            raise ConcurrencyError(
                f"Ticket {ticket_id} was modified concurrently",
                details={
                    "ticket_id": ticket_id,
                    "expected_status": from_status.value,
                    "expected_version": expected_version
                }
            )

        logger.info(
            f"Ticket status updated: {from_status.value} -> {to_status.value}",
            extra={"ticket_id": ticket_id, "from_status": from_status.value, "to_status": to_status.value}
        )

        doc.pop("_id", None)
        return TicketSnapshot.model_validate(doc)
