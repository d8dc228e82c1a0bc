"""ID Generation Utilities"""
import uuid
from datetime import datetime, timezone
from typing import Optional


def generate_id(prefix: Optional[str] = None) -> str:
    """
    Short random id, optionally prefixed

    >>> generate_id("EVT")   # doctest: +SKIP
    'EVT-3f9a0c1b7d2e'
    """
    unique_part = uuid.uuid4().hex[:12]

    if prefix:
        return f"{prefix}-{unique_part}"
    return unique_part


def generate_event_id() -> str:
    """Generate domain event ID (one per occurrence)"""
    return generate_id("EVT")


def generate_notification_id() -> str:
    """Generate notification record ID"""
    return generate_id("NTF")


def generate_correlation_id() -> str:
    """Correlation id tying a status change to the notifications it caused"""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    unique_part = uuid.uuid4().hex[:8]
    return f"COR-{timestamp}-{unique_part}"
