"""Notification Repository - In-app notification records"""
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING

from .async_mongo import get_async_collection
from ..domain.models import NotificationRecord
from ..utils.logger import get_logger

logger = get_logger(__name__)


class NotificationRepository:
    """Repository for notification records (write-once, read by the inbox)"""

    COLLECTION_NAME = "notifications"

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None):
        self._collection = collection if collection is not None else get_async_collection(self.COLLECTION_NAME)

    async def create_notification(self, record: NotificationRecord) -> bool:
        """
        Write a notification record

        Keyed on the idempotency key: writing the same (event, recipient,
        channel) twice leaves the first record untouched.

        Returns:
            True if a new record was inserted
        """
        doc = record.model_dump(mode="json")
        doc["_id"] = record.notification_id

        result = await self._collection.update_one(
            {"idempotency_key": record.idempotency_key},
            {"$setOnInsert": doc},
            upsert=True
        )
        created = result.upserted_id is not None

        if created:
            logger.info(
                f"Created notification: {record.type.value}",
                extra={
                    "notification_id": record.notification_id,
                    "user_id": record.user_id,
                    "ticket_id": record.ticket_id,
                    "event_id": record.event_id
                }
            )
        else:
            logger.debug(
                "Notification already written, skipping duplicate",
                extra={"event_id": record.event_id, "user_id": record.user_id}
            )
        return created

    async def get_notifications_for_user(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 50,
        unread_only: bool = False
    ) -> List[NotificationRecord]:
        """Get notifications for a user, newest first"""
        query = {"user_id": user_id}
        if unread_only:
            query["is_read"] = False

        cursor = self._collection.find(query).sort("created_at", DESCENDING).skip(skip).limit(limit)
        docs = await cursor.to_list(length=limit)

        notifications = []
        for doc in docs:
            doc.pop("_id", None)
            notifications.append(NotificationRecord.model_validate(doc))
        return notifications
