"""Repository modules - Data access layer"""
from .async_mongo import get_async_database, get_async_collection, create_indexes, close_async_connection
from .user_repo import UserRepository
from .preference_repo import PreferenceRepository
from .ticket_repo import TicketRepository
from .notification_repo import NotificationRepository
from .settings_repo import SettingsRepository

__all__ = [
    "get_async_database",
    "get_async_collection",
    "create_indexes",
    "close_async_connection",
    "UserRepository",
    "PreferenceRepository",
    "TicketRepository",
    "NotificationRepository",
    "SettingsRepository",
]
