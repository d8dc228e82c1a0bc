"""Event Emitter - Fire-and-forget handoff to the notification pipeline"""
import asyncio
from functools import lru_cache
from typing import Optional, Set

from ..domain.models import EventPayload
from ..notifications.delivery_log import NotificationMetrics
from ..notifications.processor import NotificationProcessor
from ..utils.logger import get_logger

logger = get_logger(__name__)


class EventEmitter:
    """
    Schedule events for asynchronous processing

    emit() returns immediately. Processing runs as an asyncio task on the
    running loop; the emitter holds a reference to each task until it
    finishes so it is not garbage collected mid-flight. Nothing raised by
    processing reaches the caller. Events emitted outside a running loop
    are dropped and counted in the shared delivery metrics.
    """

    def __init__(
        self,
        processor: Optional[NotificationProcessor] = None,
        metrics: Optional[NotificationMetrics] = None
    ):
        if processor is None:
            processor = NotificationProcessor()
        if metrics is None:
            delivery_log = getattr(processor, "delivery_log", None)
            metrics = delivery_log.metrics if delivery_log is not None else NotificationMetrics()
        self._processor = processor
        self.metrics = metrics
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        """Number of events still being processed"""
        return len(self._tasks)

    def emit(self, payload: EventPayload) -> None:
        """Hand an event to the pipeline without waiting for the outcome"""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.metrics.increment_dropped()
            logger.error(
                f"No running event loop, dropping event {payload.event_type}",
                extra={"event_id": payload.event_id}
            )
            return

        task = loop.create_task(self._run(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.debug(
            f"Event emitted: {payload.event_type}",
            extra={
                "event_id": payload.event_id,
                "entity_type": payload.entity_type.value,
                "action": payload.action.value
            }
        )

    async def _run(self, payload: EventPayload) -> None:
        try:
            await self._processor.process(payload)
        except Exception as e:
            logger.error(
                f"Event processing failed: {e}",
                extra={"event_id": payload.event_id},
                exc_info=True
            )

    async def drain(self) -> None:
        """Wait for every in-flight event (shutdown and tests)"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


@lru_cache()
def get_event_emitter() -> EventEmitter:
    """Process-wide default emitter"""
    return EventEmitter()
