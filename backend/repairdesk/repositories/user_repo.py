"""User Repository - Roster queries for notification routing"""
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError as PydanticValidationError

from .async_mongo import get_async_collection
from .preference_repo import PreferenceRepository
from ..domain.models import RosterEntry, NotificationPreference
from ..domain.enums import EntityType, EventAction
from ..utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository:
    """Read-only access to the user roster"""

    COLLECTION_NAME = "users"

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None):
        self._collection = collection if collection is not None else get_async_collection(self.COLLECTION_NAME)

    async def get_roster_with_preferences(
        self,
        entity_type: EntityType,
        action: EventAction
    ) -> List[RosterEntry]:
        """
        Every active user with role, locale and their preference row
        for (entity_type, action), if one exists.
        """
        pipeline = [
            {"$match": {"is_active": {"$ne": False}}},
            {"$lookup": {
                "from": PreferenceRepository.COLLECTION_NAME,
                "let": {"uid": "$user_id"},
                "pipeline": [
                    {"$match": {
                        "$expr": {"$eq": ["$user_id", "$$uid"]},
                        "entity_type": entity_type.value,
                        "action": action.value
                    }},
                    {"$project": {"_id": 0}}
                ],
                "as": "preferences"
            }},
            {"$project": {"_id": 0, "user_id": 1, "role": 1, "locale": 1, "preferences": 1}}
        ]

        docs = await self._collection.aggregate(pipeline).to_list(length=None)

        roster = []
        for doc in docs:
            preferences = doc.get("preferences") or []
            try:
                roster.append(RosterEntry(
                    user_id=doc["user_id"],
                    role=doc["role"],
                    locale=doc.get("locale"),
                    preference=NotificationPreference.model_validate(preferences[0]) if preferences else None
                ))
            except (KeyError, PydanticValidationError) as e:
                logger.warning(
                    f"Skipping malformed roster entry: {e}",
                    extra={"user_id": doc.get("user_id")}
                )
        return roster
