"""Delivery Channels - Where a rendered notification ends up"""
from typing import Optional
from pymongo.errors import PyMongoError

from ..domain.models import NotificationRecord
from ..domain.enums import NotificationChannelName
from ..domain.errors import NotificationDeliveryError
from ..repositories.notification_repo import NotificationRepository
from ..utils.logger import get_logger

logger = get_logger(__name__)


class NotificationChannel:
    """Channel contract: deliver one record, raise on failure"""

    name: str = ""

    async def deliver(self, record: NotificationRecord) -> bool:
        """
        Deliver a notification record

        Returns:
            True if newly delivered, False if it was already delivered
        """
        raise NotImplementedError


class InAppChannel(NotificationChannel):
    """Writes the record to the in-app notification store"""

    name = NotificationChannelName.IN_APP.value

    def __init__(self, repo: Optional[NotificationRepository] = None):
        self._repo = repo if repo is not None else NotificationRepository()

    async def deliver(self, record: NotificationRecord) -> bool:
        try:
            return await self._repo.create_notification(record)
        except PyMongoError as e:
            raise NotificationDeliveryError(
                f"Failed to write in-app notification: {e}",
                details={"event_id": record.event_id, "user_id": record.user_id}
            ) from e


def get_channel(name: str) -> NotificationChannel:
    """Channel instance for a configured channel name"""
    if name == NotificationChannelName.IN_APP.value:
        return InAppChannel()
    raise NotificationDeliveryError(
        f"Unsupported notification channel: {name}",
        details={"channel": name}
    )
