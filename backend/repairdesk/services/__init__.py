"""Service modules - Business logic layer"""
from .ticket_lifecycle_service import TicketLifecycleService
from .preference_service import PreferenceService

__all__ = [
    "TicketLifecycleService",
    "PreferenceService",
]
