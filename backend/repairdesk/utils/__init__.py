"""Utility modules"""
from .logger import get_logger, setup_logging
from .idgen import generate_id, generate_event_id, generate_notification_id, generate_correlation_id
from .time import utc_now, format_iso, parse_iso, whole_days_since

__all__ = [
    "get_logger",
    "setup_logging",
    "generate_id",
    "generate_event_id",
    "generate_notification_id",
    "generate_correlation_id",
    "utc_now",
    "format_iso",
    "parse_iso",
    "whole_days_since",
]
