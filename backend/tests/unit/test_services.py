"""Unit tests for TicketLifecycleService and PreferenceService."""
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from repairdesk.domain.enums import (
    EntityType, EventAction, LegacyNotificationType, TicketStatus, TransitionDenialCode, UserRole
)
from repairdesk.domain.errors import (
    ConcurrencyError, InvalidStateError, TicketNotFoundError, TransitionDeniedError, ValidationError
)
from repairdesk.domain.models import NotificationPreference, PreferenceUpdate, ReturnWindowCheck
from repairdesk.engine.return_window import ReturnWindowPolicy
from repairdesk.events.emitter import EventEmitter
from repairdesk.events.types import EVENT_TYPES
from repairdesk.notifications.adapter import NotificationAdapter
from repairdesk.notifications.channels import InAppChannel
from repairdesk.notifications.delivery_log import DeliveryLogger, NotificationMetrics
from repairdesk.notifications.processor import NotificationProcessor
from repairdesk.notifications.recipients import RecipientResolver
from repairdesk.services.preference_service import PreferenceService
from repairdesk.services.ticket_lifecycle_service import TicketLifecycleService
from repairdesk.templates import TemplateRenderer

from tests.conftest import FIXED_NOW, make_roster_entry, make_ticket


def _make_ticket_repo(ticket):
    repo = MagicMock()
    repo.get_ticket = AsyncMock(return_value=ticket)

    async def _get_or_raise(ticket_id):
        if ticket is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
        return ticket

    async def _update_status(ticket_id, from_status, to_status, expected_version):
        return ticket.model_copy(update={"status": to_status, "version": expected_version + 1})

    repo.get_ticket_or_raise = AsyncMock(side_effect=_get_or_raise)
    repo.update_status = AsyncMock(side_effect=_update_status)
    return repo


def _make_service(ticket, emitter=None, return_window=None):
    ticket_repo = _make_ticket_repo(ticket)
    emitter = emitter or MagicMock()
    service = TicketLifecycleService(
        ticket_repo=ticket_repo,
        emitter=emitter,
        return_window=return_window or MagicMock(),
    )
    return service, ticket_repo, emitter


# ---------------------------------------------------------------------------
# TicketLifecycleService
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_change_status_persists_and_emits(staff_actor):
    ticket = make_ticket(status=TicketStatus.RECEIVED, version=3)
    service, ticket_repo, emitter = _make_service(ticket)

    updated = await service.change_status("TKT-1", TicketStatus.IN_PROGRESS, staff_actor)

    assert updated.status == TicketStatus.IN_PROGRESS
    ticket_repo.update_status.assert_awaited_once_with(
        "TKT-1",
        from_status=TicketStatus.RECEIVED,
        to_status=TicketStatus.IN_PROGRESS,
        expected_version=3,
    )
    event = emitter.emit.call_args.args[0]
    assert event.entity_type == EntityType.TICKET
    assert event.action == EventAction.STATUS_CHANGED
    assert event.summary == "RECEIVED→IN_PROGRESS"
    assert event.actor_id == "u-staff"
    assert event.meta["fromStatus"] == "RECEIVED"
    assert event.meta["toStatus"] == "IN_PROGRESS"
    assert event.device.model == "iPhone 12"
    assert event.event_id.startswith("EVT-")


@pytest.mark.asyncio
async def test_denied_change_raises_and_does_not_write(technician_actor):
    ticket = make_ticket(status=TicketStatus.REPAIRED)
    service, ticket_repo, emitter = _make_service(ticket)

    with pytest.raises(TransitionDeniedError) as exc_info:
        await service.change_status("TKT-1", TicketStatus.COMPLETED, technician_actor)

    assert exc_info.value.reason_code == TransitionDenialCode.INSUFFICIENT_PERMISSIONS.value
    assert exc_info.value.details["reason_code"] == "INSUFFICIENT_PERMISSIONS"
    ticket_repo.update_status.assert_not_awaited()
    emitter.emit.assert_not_called()


@pytest.mark.asyncio
async def test_outstanding_balance_blocks_completion(staff_actor):
    ticket = make_ticket(status=TicketStatus.REPAIRED, final_price=200, amount_paid=50)
    service, _, _ = _make_service(ticket)

    with pytest.raises(TransitionDeniedError) as exc_info:
        await service.change_status("TKT-1", TicketStatus.COMPLETED, staff_actor)

    assert exc_info.value.reason_code == "PAYMENT_REQUIRED"
    assert "150" in exc_info.value.message


@pytest.mark.asyncio
async def test_ticket_paid_in_instalments_can_be_completed(staff_actor):
    ticket = make_ticket(status=TicketStatus.REPAIRED, final_price=30.3, amount_paid=10.1 + 20.2)
    service, ticket_repo, emitter = _make_service(ticket)

    assert ticket.payment_status().paid

    updated = await service.change_status("TKT-1", TicketStatus.COMPLETED, staff_actor)

    assert updated.status == TicketStatus.COMPLETED
    ticket_repo.update_status.assert_awaited_once()
    emitter.emit.assert_called_once()


@pytest.mark.asyncio
async def test_outstanding_balance_is_reported_in_cents(staff_actor):
    ticket = make_ticket(status=TicketStatus.REPAIRED, final_price=30.3, amount_paid=10.1 + 20.1)
    service, _, _ = _make_service(ticket)

    with pytest.raises(TransitionDeniedError) as exc_info:
        await service.change_status("TKT-1", TicketStatus.COMPLETED, staff_actor)

    assert exc_info.value.reason_code == "PAYMENT_REQUIRED"
    assert "outstanding balance of 0.1." in exc_info.value.message


@pytest.mark.asyncio
async def test_same_status_is_a_no_op(technician_actor):
    ticket = make_ticket(status=TicketStatus.IN_PROGRESS)
    service, ticket_repo, emitter = _make_service(ticket)

    result = await service.change_status("TKT-1", TicketStatus.IN_PROGRESS, technician_actor)

    assert result is ticket
    ticket_repo.update_status.assert_not_awaited()
    emitter.emit.assert_not_called()


@pytest.mark.asyncio
async def test_missing_ticket_raises_not_found(staff_actor):
    service, _, _ = _make_service(None)

    with pytest.raises(TicketNotFoundError):
        await service.change_status("TKT-404", TicketStatus.IN_PROGRESS, staff_actor)


@pytest.mark.asyncio
async def test_concurrent_modification_is_not_emitted(staff_actor):
    ticket = make_ticket(status=TicketStatus.RECEIVED)
    service, ticket_repo, emitter = _make_service(ticket)
    ticket_repo.update_status.side_effect = ConcurrencyError("modified concurrently")

    with pytest.raises(ConcurrencyError):
        await service.change_status("TKT-1", TicketStatus.IN_PROGRESS, staff_actor)

    emitter.emit.assert_not_called()


def test_available_transitions_for_actor(technician_actor, staff_actor):
    service, _, _ = _make_service(make_ticket())
    ticket = make_ticket(status=TicketStatus.IN_PROGRESS)

    assert TicketStatus.CANCELLED not in service.available_transitions(ticket, technician_actor)
    assert TicketStatus.CANCELLED in service.available_transitions(ticket, staff_actor)


@pytest.mark.asyncio
async def test_return_eligibility_requires_completed_ticket():
    service, _, _ = _make_service(make_ticket(status=TicketStatus.REPAIRED))

    with pytest.raises(InvalidStateError):
        await service.check_return_eligibility("TKT-1")


@pytest.mark.asyncio
async def test_return_eligibility_uses_return_window():
    completed_at = FIXED_NOW - timedelta(days=2)
    return_window = MagicMock()
    return_window.is_within_return_window = AsyncMock(return_value=ReturnWindowCheck(allowed=True))
    service, _, _ = _make_service(
        make_ticket(status=TicketStatus.COMPLETED, completed_at=completed_at),
        return_window=return_window,
    )

    check = await service.check_return_eligibility("TKT-1")

    assert check.allowed
    return_window.is_within_return_window.assert_awaited_once_with(completed_at)


@pytest.mark.asyncio
async def test_received_to_cancelled_end_to_end(staff_actor):
    """Staff cancels a ticket: the admin and the assigned technician are told, the actor is not."""
    ticket = make_ticket(status=TicketStatus.RECEIVED, assigned_to_id="u-tech")
    ticket_repo = _make_ticket_repo(ticket)

    user_repo = MagicMock()
    user_repo.get_roster_with_preferences = AsyncMock(return_value=[
        make_roster_entry("u-admin", UserRole.ADMIN),
        make_roster_entry("u-staff", UserRole.STAFF),
        make_roster_entry("u-tech", UserRole.TECHNICIAN),
        make_roster_entry("u-tech2", UserRole.TECHNICIAN),
    ])
    notification_repo = MagicMock()
    notification_repo.create_notification = AsyncMock(return_value=True)

    delivery_log = DeliveryLogger(metrics=NotificationMetrics(), buffer_size=10)
    processor = NotificationProcessor(
        resolver=RecipientResolver(user_repo=user_repo, ticket_repo=ticket_repo),
        adapter=NotificationAdapter(renderer=TemplateRenderer(default_locale="en")),
        channel=InAppChannel(repo=notification_repo),
        delivery_log=delivery_log,
    )
    emitter = EventEmitter(processor=processor)
    service = TicketLifecycleService(
        ticket_repo=ticket_repo,
        emitter=emitter,
        return_window=ReturnWindowPolicy(settings_repo=MagicMock(), default_days=30),
    )

    updated = await service.change_status("TKT-1", TicketStatus.CANCELLED, staff_actor)
    await emitter.drain()

    assert updated.status == TicketStatus.CANCELLED
    records = [call.args[0] for call in notification_repo.create_notification.await_args_list]
    assert sorted(r.user_id for r in records) == ["u-admin", "u-tech"]
    assert all(r.type == LegacyNotificationType.STATUS_CHANGE for r in records)
    assert all(r.message == "Sam Staff changed ticket T-0001 status: RECEIVED→CANCELLED" for r in records)
    assert delivery_log.metrics.snapshot().sent == 2
    assert delivery_log.metrics.snapshot().failed == 0


# ---------------------------------------------------------------------------
# PreferenceService
# ---------------------------------------------------------------------------


def _make_preference_repo(rows=None):
    repo = MagicMock()
    repo.get_for_user = AsyncMock(return_value=rows or [])
    repo.upsert_many = AsyncMock(side_effect=lambda user_id, updates: len(updates))
    return repo


@pytest.mark.asyncio
async def test_effective_preferences_default_to_enabled():
    stored = NotificationPreference(
        user_id="u-1", entity_type=EntityType.PART, action=EventAction.USED, enabled=False
    )
    service = PreferenceService(preference_repo=_make_preference_repo([stored]))

    effective = await service.get_effective_preferences("u-1")

    assert len(effective) == len(EVENT_TYPES)
    by_pair = {(p.entity_type, p.action): p.enabled for p in effective}
    assert by_pair[(EntityType.PART, EventAction.USED)] is False
    assert by_pair[(EntityType.TICKET, EventAction.CREATED)] is True


@pytest.mark.asyncio
async def test_save_preferences_validates_and_upserts():
    repo = _make_preference_repo()
    service = PreferenceService(preference_repo=repo)

    saved = await service.save_preferences("u-1", [
        {"entity_type": "ticket", "action": "status_changed", "enabled": False},
        PreferenceUpdate(entity_type=EntityType.CHARGE, action=EventAction.ADDED, enabled=True),
    ])

    assert saved == 2
    user_id, updates = repo.upsert_many.await_args.args
    assert user_id == "u-1"
    assert updates[0].entity_type == EntityType.TICKET
    assert updates[0].enabled is False


@pytest.mark.asyncio
async def test_save_preferences_rejects_unknown_entity_type():
    repo = _make_preference_repo()
    service = PreferenceService(preference_repo=repo)

    with pytest.raises(ValidationError) as exc_info:
        await service.save_preferences("u-1", [
            {"entity_type": "invoice", "action": "created", "enabled": False},
        ])

    assert exc_info.value.error_code == "VALIDATION_ERROR"
    repo.upsert_many.assert_not_awaited()
