"""Preference Service - Per-user notification opt-outs"""
from typing import Any, Dict, Iterable, List, Optional, Union
from pydantic import ValidationError as PydanticValidationError

from ..domain.models import NotificationPreference, PreferenceUpdate
from ..domain.errors import ValidationError
from ..repositories.preference_repo import PreferenceRepository
from ..events.types import known_event_pairs
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PreferenceService:
    """Service for reading and saving notification preferences"""

    def __init__(self, preference_repo: Optional[PreferenceRepository] = None):
        self.preference_repo = preference_repo if preference_repo is not None else PreferenceRepository()

    async def get_preferences(self, user_id: str) -> List[NotificationPreference]:
        """Stored rows only"""
        return await self.preference_repo.get_for_user(user_id)

    async def get_effective_preferences(self, user_id: str) -> List[NotificationPreference]:
        """One entry per known event type; missing rows count as enabled"""
        stored = {
            (pref.entity_type, pref.action): pref
            for pref in await self.preference_repo.get_for_user(user_id)
        }

        effective = []
        for entity_type, action in known_event_pairs():
            pref = stored.pop((entity_type, action), None)
            effective.append(pref or NotificationPreference(
                user_id=user_id,
                entity_type=entity_type,
                action=action,
                enabled=True
            ))

        # Stored rows for pairs outside the known list
        effective.extend(stored.values())
        return effective

    async def save_preferences(
        self,
        user_id: str,
        items: Iterable[Union[PreferenceUpdate, Dict[str, Any]]]
    ) -> int:
        """
        Validate and upsert preference toggles

        Raises:
            ValidationError: if any item names an unknown entity type or action
        """
        updates: List[PreferenceUpdate] = []
        for index, item in enumerate(items):
            if isinstance(item, PreferenceUpdate):
                updates.append(item)
                continue
            try:
                updates.append(PreferenceUpdate.model_validate(item))
            except PydanticValidationError as e:
                raise ValidationError(
                    f"Invalid notification preference at position {index}",
                    details={"user_id": user_id, "item": item, "errors": e.errors(include_url=False)}
                ) from e

        return await self.preference_repo.upsert_many(user_id, updates)
