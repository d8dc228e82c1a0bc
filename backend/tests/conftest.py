"""
Pytest Configuration and Fixtures

Shared factories for events, tickets and roster entries. Repositories
are always injected as mocks so no test touches MongoDB.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pytest

from repairdesk.domain.enums import EntityType, EventAction, TicketStatus, UserRole
from repairdesk.domain.models import (
    ActorContext, DeviceInfo, EventPayload, NotificationPreference, RosterEntry, TicketSnapshot
)


FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_event(
    entity_type: EntityType = EntityType.TICKET,
    action: EventAction = EventAction.STATUS_CHANGED,
    entity_id: str = "TKT-1",
    actor_id: str = "u-admin",
    actor_name: str = "Alice Admin",
    summary: str = "RECEIVED→IN_PROGRESS",
    meta: Optional[Dict[str, Any]] = None,
    ticket_id: Optional[str] = None,
    customer_id: Optional[str] = None,
    device: Optional[DeviceInfo] = None,
    event_id: str = "EVT-1",
) -> EventPayload:
    return EventPayload(
        event_id=event_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        actor_id=actor_id,
        actor_name=actor_name,
        timestamp=FIXED_NOW,
        summary=summary,
        meta=meta or {},
        ticket_id=ticket_id,
        customer_id=customer_id,
        device=device,
    )


def make_ticket(
    status: TicketStatus = TicketStatus.RECEIVED,
    ticket_id: str = "TKT-1",
    assigned_to_id: Optional[str] = None,
    final_price: float = 0,
    amount_paid: float = 0,
    completed_at: Optional[datetime] = None,
    version: int = 1,
) -> TicketSnapshot:
    return TicketSnapshot(
        ticket_id=ticket_id,
        ticket_number="T-0001",
        status=status,
        assigned_to_id=assigned_to_id,
        customer_id="c-1",
        customer_name="Carol Customer",
        device=DeviceInfo(brand="Apple", model="iPhone 12", issue="Cracked screen"),
        final_price=final_price,
        amount_paid=amount_paid,
        completed_at=completed_at,
        version=version,
    )


def make_roster_entry(
    user_id: str,
    role: UserRole,
    locale: Optional[str] = None,
    enabled: Optional[bool] = None,
    entity_type: EntityType = EntityType.TICKET,
    action: EventAction = EventAction.STATUS_CHANGED,
) -> RosterEntry:
    preference = None
    if enabled is not None:
        preference = NotificationPreference(
            user_id=user_id, entity_type=entity_type, action=action, enabled=enabled
        )
    return RosterEntry(user_id=user_id, role=role, locale=locale, preference=preference)


@pytest.fixture
def admin_actor() -> ActorContext:
    return ActorContext(user_id="u-admin", display_name="Alice Admin", role=UserRole.ADMIN)


@pytest.fixture
def staff_actor() -> ActorContext:
    return ActorContext(user_id="u-staff", display_name="Sam Staff", role=UserRole.STAFF)


@pytest.fixture
def technician_actor() -> ActorContext:
    return ActorContext(user_id="u-tech", display_name="Tom Tech", role=UserRole.TECHNICIAN)
