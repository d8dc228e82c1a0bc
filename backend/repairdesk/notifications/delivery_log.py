"""Delivery Log - Per-attempt structured logging and running counters"""
import threading
from collections import deque
from typing import Deque, List, Optional

from ..domain.models import DeliveryLogEntry, MetricsSnapshot
from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


class NotificationMetrics:
    """Thread-safe sent/failed/dropped counters. Only reset() lowers them."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sent = 0
        self._failed = 0
        self._dropped = 0

    def increment_sent(self) -> None:
        with self._lock:
            self._sent += 1

    def increment_failed(self) -> None:
        with self._lock:
            self._failed += 1

    def increment_dropped(self) -> None:
        with self._lock:
            self._dropped += 1

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return MetricsSnapshot(sent=self._sent, failed=self._failed, dropped=self._dropped)

    def reset(self) -> None:
        with self._lock:
            self._sent = 0
            self._failed = 0
            self._dropped = 0


class DeliveryLogger:
    """
    Record every delivery attempt

    Each entry becomes one structured log line (INFO on success, WARNING
    on failure), bumps the metrics, and is kept in a bounded buffer of
    recent attempts.
    """

    def __init__(
        self,
        metrics: Optional[NotificationMetrics] = None,
        buffer_size: Optional[int] = None
    ):
        self.metrics = metrics if metrics is not None else NotificationMetrics()
        size = buffer_size if buffer_size is not None else settings.delivery_log_buffer_size
        self._recent: Deque[DeliveryLogEntry] = deque(maxlen=max(size, 1))
        self._lock = threading.Lock()

    def record(self, entry: DeliveryLogEntry) -> None:
        extra = {
            "event_id": entry.event_id,
            "entity_type": entry.entity_type.value,
            "action": entry.action.value,
            "recipient_id": entry.recipient_id,
            "channel": entry.channel,
            "success": entry.success,
        }

        if entry.success:
            self.metrics.increment_sent()
            logger.info(
                f"Notification delivered to {entry.recipient_id}",
                extra=extra
            )
        else:
            self.metrics.increment_failed()
            extra["error"] = entry.error
            logger.warning(
                f"Notification delivery failed for {entry.recipient_id}: {entry.error}",
                extra=extra
            )

        with self._lock:
            self._recent.append(entry)

    def recent_entries(self) -> List[DeliveryLogEntry]:
        """Most recent attempts, oldest first"""
        with self._lock:
            return list(self._recent)
