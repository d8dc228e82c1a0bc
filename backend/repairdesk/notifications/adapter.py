"""Notification Adapter - Bridge from domain events to the legacy notification taxonomy"""
from typing import Dict, Optional, Tuple

from ..domain.models import EventPayload, TranslatedNotification
from ..domain.enums import EntityType, EventAction, LegacyNotificationType
from ..templates import TemplateRenderer


# Explicit (entity_type, action) -> category pairs
_EVENT_CATEGORY: Dict[Tuple[EntityType, EventAction], LegacyNotificationType] = {
    (EntityType.TICKET, EventAction.CREATED): LegacyNotificationType.TICKET_CREATED,
    (EntityType.TICKET, EventAction.STATUS_CHANGED): LegacyNotificationType.STATUS_CHANGE,
    (EntityType.TICKET, EventAction.ASSIGNED): LegacyNotificationType.ASSIGNMENT,
    (EntityType.CHARGE, EventAction.ADDED): LegacyNotificationType.PRICE_ADJUSTMENT,
    (EntityType.PAYMENT, EventAction.CREATED): LegacyNotificationType.PAYMENT_STATUS_CHANGE,
}

# Everything else is classified by action alone
_ACTION_FALLBACK: Dict[EventAction, LegacyNotificationType] = {
    EventAction.CREATED: LegacyNotificationType.TICKET_CREATED,
}


def get_notification_category(entity_type: EntityType, action: EventAction) -> LegacyNotificationType:
    """Legacy category for an event type (total: every pair maps somewhere)"""
    category = _EVENT_CATEGORY.get((entity_type, action))
    if category is not None:
        return category
    return _ACTION_FALLBACK.get(action, LegacyNotificationType.STATUS_CHANGE)


class NotificationAdapter:
    """Translate one event for one recipient"""

    def __init__(self, renderer: Optional[TemplateRenderer] = None):
        self._renderer = renderer or TemplateRenderer()

    def translate(
        self,
        event: EventPayload,
        recipient_id: str,
        locale: Optional[str] = None
    ) -> TranslatedNotification:
        return TranslatedNotification(
            category=get_notification_category(event.entity_type, event.action),
            message=self._renderer.render(event, locale),
            user_id=recipient_id,
            ticket_id=event.related_ticket_id
        )

    @staticmethod
    def idempotency_key(event: EventPayload, recipient_id: str, channel: str) -> str:
        """Stable key per (event, recipient, channel)"""
        return f"{event.event_id}:{recipient_id}:{channel}"
