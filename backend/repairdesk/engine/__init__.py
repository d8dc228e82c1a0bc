"""Ticket Lifecycle Engine - status tables, transition guard, return window"""
from .transition_guard import TransitionGuard
from .return_window import ReturnWindowPolicy
from .status_table import get_allowed_transitions, is_valid_transition, get_status_display_info
from .permission_table import has_permission, get_allowed_transitions_for_role

__all__ = [
    "TransitionGuard",
    "ReturnWindowPolicy",
    "get_allowed_transitions",
    "is_valid_transition",
    "get_status_display_info",
    "has_permission",
    "get_allowed_transitions_for_role",
]
