"""Ticket Lifecycle Service - Guarded status changes and their events"""
from typing import List, Optional

from ..domain.models import (
    TicketSnapshot, ActorContext, TransitionRequest, EventPayload, ReturnWindowCheck
)
from ..domain.enums import TicketStatus, EntityType, EventAction
from ..domain.errors import TransitionDeniedError, InvalidStateError
from ..repositories.ticket_repo import TicketRepository
from ..engine.transition_guard import TransitionGuard
from ..engine.return_window import ReturnWindowPolicy
from ..events.emitter import EventEmitter, get_event_emitter
from ..utils.idgen import generate_event_id
from ..utils.time import utc_now
from ..utils.logger import get_logger, set_correlation_id

logger = get_logger(__name__)


class TicketLifecycleService:
    """Service for moving tickets through their lifecycle"""

    def __init__(
        self,
        ticket_repo: Optional[TicketRepository] = None,
        emitter: Optional[EventEmitter] = None,
        guard: Optional[TransitionGuard] = None,
        return_window: Optional[ReturnWindowPolicy] = None
    ):
        self.ticket_repo = ticket_repo if ticket_repo is not None else TicketRepository()
        self.emitter = emitter if emitter is not None else get_event_emitter()
        self.guard = guard or TransitionGuard()
        self.return_window = return_window if return_window is not None else ReturnWindowPolicy()

    async def change_status(
        self,
        ticket_id: str,
        target: TicketStatus,
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> TicketSnapshot:
        """
        Change a ticket's status

        The guard decides; a denial raises TransitionDeniedError. Same-state
        requests return the ticket unchanged. A persisted change emits a
        ticket.status_changed event.
        """
        if correlation_id:
            set_correlation_id(correlation_id)

        ticket = await self.ticket_repo.get_ticket_or_raise(ticket_id)

        decision = self.guard.decide(TransitionRequest(
            current_state=ticket.status,
            target_state=target,
            actor_role=actor.role,
            payment_status=ticket.payment_status()
        ))

        if not decision.allowed:
            logger.info(
                f"Status change denied: {decision.human_reason}",
                extra={
                    "ticket_id": ticket_id,
                    "actor_id": actor.user_id,
                    "reason_code": decision.reason_code.value,
                    "from_status": ticket.status.value,
                    "to_status": target.value
                }
            )
            details = {"ticket_id": ticket_id}
            if decision.allowed_targets:
                details["allowed_targets"] = [t.value for t in decision.allowed_targets]
            raise TransitionDeniedError(
                decision.human_reason,
                reason_code=decision.reason_code.value,
                details=details
            )

        if ticket.status == target:
            return ticket

        from_status = ticket.status
        updated = await self.ticket_repo.update_status(
            ticket_id,
            from_status=from_status,
            to_status=target,
            expected_version=ticket.version
        )

        self.emitter.emit(self._status_changed_event(updated, from_status, actor))
        return updated

    def available_transitions(self, ticket: TicketSnapshot, actor: ActorContext) -> List[TicketStatus]:
        """Targets the actor's role may pick for this ticket"""
        return self.guard.get_available_transitions(ticket.status, actor.role)

    async def check_return_eligibility(self, ticket_id: str) -> ReturnWindowCheck:
        """Whether a completed ticket may still be returned"""
        ticket = await self.ticket_repo.get_ticket_or_raise(ticket_id)
        if ticket.status != TicketStatus.COMPLETED:
            raise InvalidStateError(
                f"Only completed tickets can be returned (status: {ticket.status.value})",
                details={"ticket_id": ticket_id, "status": ticket.status.value}
            )
        return await self.return_window.is_within_return_window(ticket.completed_at)

    @staticmethod
    def _status_changed_event(
        ticket: TicketSnapshot,
        from_status: TicketStatus,
        actor: ActorContext
    ) -> EventPayload:
        return EventPayload(
            event_id=generate_event_id(),
            entity_type=EntityType.TICKET,
            entity_id=ticket.ticket_id,
            action=EventAction.STATUS_CHANGED,
            actor_id=actor.user_id,
            actor_name=actor.display_name,
            timestamp=utc_now(),
            summary=f"{from_status.value}→{ticket.status.value}",
            meta={
                "fromStatus": from_status.value,
                "toStatus": ticket.status.value,
                "ticketNumber": ticket.ticket_number or ticket.ticket_id,
                "customerName": ticket.customer_name or "",
            },
            customer_id=ticket.customer_id,
            ticket_id=ticket.ticket_id,
            device=ticket.device
        )
