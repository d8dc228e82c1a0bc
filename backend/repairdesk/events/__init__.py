"""Domain events - event types and the fire-and-forget emitter"""
from .types import EVENT_TYPES, known_event_pairs, split_event_type
from .emitter import EventEmitter, get_event_emitter

__all__ = [
    "EVENT_TYPES",
    "known_event_pairs",
    "split_event_type",
    "EventEmitter",
    "get_event_emitter",
]
