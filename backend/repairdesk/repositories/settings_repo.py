"""Settings Repository - Key/value shop settings"""
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorCollection

from .async_mongo import get_async_collection


class SettingsRepository:
    """Repository for admin-editable key/value settings"""

    COLLECTION_NAME = "settings"

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None):
        self._collection = collection if collection is not None else get_async_collection(self.COLLECTION_NAME)

    async def get_value(self, key: str) -> Optional[str]:
        """Get raw setting value, None if unset"""
        doc = await self._collection.find_one({"key": key}, {"_id": 0, "value": 1})
        if not doc:
            return None
        value = doc.get("value")
        return None if value is None else str(value)
