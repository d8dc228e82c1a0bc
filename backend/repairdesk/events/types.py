"""Event Types - Known (entity_type, action) pairs"""
from typing import Dict, List, Tuple

from ..domain.enums import EntityType, EventAction


EVENT_TYPES: Dict[str, str] = {
    "CUSTOMER_CREATED": "customer.created",
    "CUSTOMER_UPDATED": "customer.updated",
    "CUSTOMER_DELETED": "customer.deleted",
    "TICKET_CREATED": "ticket.created",
    "TICKET_UPDATED": "ticket.updated",
    "TICKET_STATUS_CHANGED": "ticket.status_changed",
    "TICKET_DELETED": "ticket.deleted",
    "PAYMENT_CREATED": "payment.created",
    "CHARGE_ADDED": "charge.added",
    "CHARGE_REMOVED": "charge.removed",
    "REPAIRJOB_ASSIGNED": "repairjob.assigned",
    "REPAIRJOB_COMPLETED": "repairjob.completed",
    "REPAIRJOB_UPDATED": "repairjob.updated",
    "PART_USED": "part.used",
    "PART_REMOVED": "part.removed",
    "SUPPLIER_CREATED": "supplier.created",
    "SUPPLIER_UPDATED": "supplier.updated",
    "SUPPLIER_DELETED": "supplier.deleted",
}


def split_event_type(event_type: str) -> Tuple[EntityType, EventAction]:
    """'ticket.status_changed' -> (EntityType.TICKET, EventAction.STATUS_CHANGED)"""
    entity, _, action = event_type.partition(".")
    return EntityType(entity), EventAction(action)


def known_event_pairs() -> List[Tuple[EntityType, EventAction]]:
    """Every known event type as an enum pair, in declaration order"""
    return [split_event_type(value) for value in EVENT_TYPES.values()]
