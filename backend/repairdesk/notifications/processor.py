"""Notification Processor - Fan one event out to every recipient"""
import asyncio
from typing import Optional

from ..domain.models import EventPayload, NotificationRecord, DeliveryLogEntry
from ..config.settings import settings
from ..utils.idgen import generate_notification_id
from ..utils.time import utc_now
from ..utils.logger import get_logger
from .recipients import RecipientResolver
from .adapter import NotificationAdapter
from .channels import NotificationChannel, get_channel
from .delivery_log import DeliveryLogger

logger = get_logger(__name__)


class NotificationProcessor:
    """
    Resolve -> adapt/render -> deliver -> log, per recipient

    Recipients are delivered concurrently and independently: one failing
    write is logged as a failed attempt and the rest carry on. process()
    never raises.
    """

    def __init__(
        self,
        resolver: Optional[RecipientResolver] = None,
        adapter: Optional[NotificationAdapter] = None,
        channel: Optional[NotificationChannel] = None,
        delivery_log: Optional[DeliveryLogger] = None,
        timeout_seconds: Optional[float] = None
    ):
        self._resolver = resolver if resolver is not None else RecipientResolver()
        self._adapter = adapter if adapter is not None else NotificationAdapter()
        self._channel = channel if channel is not None else get_channel(settings.notification_channel)
        self.delivery_log = delivery_log if delivery_log is not None else DeliveryLogger()
        self._timeout_seconds = (
            timeout_seconds if timeout_seconds is not None
            else settings.notification_delivery_timeout_seconds
        )
        self._supported_locales = frozenset(settings.supported_locales_list)

    async def process(self, event: EventPayload) -> None:
        """Deliver an event to all its recipients"""
        try:
            recipients = await self._resolver.resolve_with_locales(event)
            if not recipients:
                logger.info(
                    f"No recipients for {event.event_type}",
                    extra={"event_id": event.event_id}
                )
                return

            await asyncio.gather(
                *(self._deliver(event, recipient_id, locale) for recipient_id, locale in recipients.items()),
                return_exceptions=True
            )
        except Exception as e:
            logger.error(
                f"Notification pipeline failed for {event.event_type}: {e}",
                extra={"event_id": event.event_id},
                exc_info=True
            )

    async def _deliver(self, event: EventPayload, recipient_id: str, locale: Optional[str]) -> None:
        channel_name = self._channel.name
        try:
            if locale not in self._supported_locales:
                locale = None
            translated = self._adapter.translate(event, recipient_id, locale)
            record = NotificationRecord(
                notification_id=generate_notification_id(),
                type=translated.category,
                message=translated.message,
                user_id=recipient_id,
                ticket_id=translated.ticket_id,
                event_id=event.event_id,
                channel=channel_name,
                idempotency_key=self._adapter.idempotency_key(event, recipient_id, channel_name),
                created_at=utc_now()
            )

            if self._timeout_seconds:
                await asyncio.wait_for(self._channel.deliver(record), timeout=self._timeout_seconds)
            else:
                await self._channel.deliver(record)

            self._log_attempt(event, recipient_id, channel_name, success=True)
        except asyncio.TimeoutError:
            self._log_attempt(
                event, recipient_id, channel_name, success=False,
                error=f"Delivery timed out after {self._timeout_seconds}s"
            )
        except Exception as e:
            self._log_attempt(event, recipient_id, channel_name, success=False, error=str(e) or type(e).__name__)

    def _log_attempt(
        self,
        event: EventPayload,
        recipient_id: str,
        channel: str,
        success: bool,
        error: Optional[str] = None
    ) -> None:
        self.delivery_log.record(DeliveryLogEntry(
            event_id=event.event_id,
            entity_type=event.entity_type,
            action=event.action,
            recipient_id=recipient_id,
            channel=channel,
            success=success,
            error=error,
            timestamp=utc_now()
        ))
