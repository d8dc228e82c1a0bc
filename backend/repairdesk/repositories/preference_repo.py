"""Preference Repository - Per-user notification opt-outs"""
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import UpdateOne

from .async_mongo import get_async_collection
from ..domain.models import NotificationPreference, PreferenceUpdate
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class PreferenceRepository:
    """
    Repository for notification preference rows

    One row per (user_id, entity_type, action). A missing row means
    the notification is enabled.
    """

    COLLECTION_NAME = "notification_preferences"

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None):
        self._collection = collection if collection is not None else get_async_collection(self.COLLECTION_NAME)

    async def get_for_user(self, user_id: str) -> List[NotificationPreference]:
        """All stored rows for a user"""
        cursor = self._collection.find({"user_id": user_id}, {"_id": 0})
        docs = await cursor.to_list(length=None)
        return [NotificationPreference.model_validate(doc) for doc in docs]

    async def upsert_many(self, user_id: str, updates: List[PreferenceUpdate]) -> int:
        """Insert or update rows keyed by (user_id, entity_type, action). Returns rows touched."""
        if not updates:
            return 0

        now = utc_now()
        operations = [
            UpdateOne(
                {
                    "user_id": user_id,
                    "entity_type": update.entity_type.value,
                    "action": update.action.value
                },
                {
                    "$set": {"enabled": update.enabled, "updated_at": now},
                    "$setOnInsert": {
                        "user_id": user_id,
                        "entity_type": update.entity_type.value,
                        "action": update.action.value
                    }
                },
                upsert=True
            )
            for update in updates
        ]

        result = await self._collection.bulk_write(operations, ordered=False)
        touched = result.upserted_count + result.modified_count

        logger.info(
            f"Saved {len(updates)} notification preferences",
            extra={"user_id": user_id}
        )
        return touched
