"""Notification pipeline - recipients, adapter, channels, delivery log, processor"""
from .adapter import NotificationAdapter, get_notification_category
from .channels import NotificationChannel, InAppChannel, get_channel
from .delivery_log import DeliveryLogger, NotificationMetrics
from .recipients import RecipientResolver
from .processor import NotificationProcessor

__all__ = [
    "NotificationAdapter",
    "get_notification_category",
    "NotificationChannel",
    "InAppChannel",
    "get_channel",
    "DeliveryLogger",
    "NotificationMetrics",
    "RecipientResolver",
    "NotificationProcessor",
]
