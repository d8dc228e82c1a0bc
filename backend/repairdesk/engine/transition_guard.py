"""Transition Guard - Single authority for ticket status changes"""
from typing import List, Union

from ..domain.models import TransitionRequest, TransitionDecision, PaymentStatus, round_money
from ..domain.enums import TicketStatus, UserRole, TransitionDenialCode
from .status_table import CLOSED_STATES, is_valid_transition, get_allowed_transitions
from .permission_table import has_permission, get_allowed_transitions_for_role


def _format_amount(amount: float) -> str:
    return ("%.2f" % amount).rstrip("0").rstrip(".")


class TransitionGuard:
    """
    Decide whether a ticket may move from one status to another

    Rules (first match wins):
    1. Same status -> allowed (no-op)
    2. Leaving RETURNED or CANCELLED -> TERMINAL_STATE
    3. Entering RETURNED -> RETURN_FLOW_REQUIRED (approval flow only)
    4. Target not a listed successor -> INVALID_TRANSITION
    5. Role lacks the edge -> INSUFFICIENT_PERMISSIONS
    6. REPAIRED -> COMPLETED with an outstanding balance -> PAYMENT_REQUIRED
    7. Otherwise allowed

    Denials are returned, never raised. The guard emits no events;
    callers emit after they persist an allowed change.
    """

    def decide(self, request: TransitionRequest) -> TransitionDecision:
        """Evaluate a transition request"""
        current = request.current_state
        target = request.target_state
        role = request.actor_role

        if current == target:
            return TransitionDecision.allow()

        if current in CLOSED_STATES:
            return TransitionDecision.deny(
                TransitionDenialCode.TERMINAL_STATE,
                f"Cannot transition from terminal state: {current.value}"
            )

        if target == TicketStatus.RETURNED:
            return TransitionDecision.deny(
                TransitionDenialCode.RETURN_FLOW_REQUIRED,
                "RETURNED status can only be set via the Return approval flow"
            )

        if not is_valid_transition(current, target):
            allowed_targets = get_allowed_transitions(current)
            allowed_text = ", ".join(t.value for t in allowed_targets) or "none"
            return TransitionDecision.deny(
                TransitionDenialCode.INVALID_TRANSITION,
                f"Invalid transition from {current.value} to {target.value}. Allowed: {allowed_text}",
                allowed_targets=allowed_targets
            )

        if not has_permission(role, current, target):
            return TransitionDecision.deny(
                TransitionDenialCode.INSUFFICIENT_PERMISSIONS,
                f"Role {role.value} does not have permission to transition "
                f"from {current.value} to {target.value}"
            )

        if current == TicketStatus.REPAIRED and target == TicketStatus.COMPLETED:
            payment = request.payment_status
            outstanding = round_money(payment.outstanding_amount) if payment else 0
            if outstanding > 0:
                return TransitionDecision.deny(
                    TransitionDenialCode.PAYMENT_REQUIRED,
                    f"Cannot complete ticket with outstanding balance of "
                    f"{_format_amount(outstanding)}. Payment required."
                )

        return TransitionDecision.allow()

    def can_transition(
        self,
        current: Union[TicketStatus, str],
        target: Union[TicketStatus, str],
        role: Union[UserRole, str],
        outstanding_amount: float = 0
    ) -> TransitionDecision:
        """Convenience wrapper building the request from plain values"""
        return self.decide(
            TransitionRequest(
                current_state=TicketStatus(current),
                target_state=TicketStatus(target),
                actor_role=UserRole(role),
                payment_status=PaymentStatus(
                    paid=outstanding_amount <= 0,
                    outstanding_amount=outstanding_amount
                )
            )
        )

    def get_available_transitions(
        self,
        current: Union[TicketStatus, str],
        role: Union[UserRole, str]
    ) -> List[TicketStatus]:
        """Targets the role may pick from current (before business rules)"""
        return get_allowed_transitions_for_role(current, role)
