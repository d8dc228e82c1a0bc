"""Status Table - Valid ticket status transitions"""
from typing import Dict, FrozenSet, List, Union

from ..domain.enums import TicketStatus
from ..domain.models import StatusDisplayInfo


# RETURNED never appears as a target: it is only set by the return approval flow
VALID_TRANSITIONS: Dict[TicketStatus, List[TicketStatus]] = {
    TicketStatus.RECEIVED: [TicketStatus.IN_PROGRESS, TicketStatus.CANCELLED],
    TicketStatus.IN_PROGRESS: [
        TicketStatus.WAITING_FOR_PARTS,
        TicketStatus.REPAIRED,
        TicketStatus.CANCELLED,
    ],
    TicketStatus.WAITING_FOR_PARTS: [
        TicketStatus.IN_PROGRESS,
        TicketStatus.REPAIRED,
        TicketStatus.CANCELLED,
    ],
    TicketStatus.REPAIRED: [TicketStatus.COMPLETED],
    TicketStatus.COMPLETED: [],
    TicketStatus.RETURNED: [],
    TicketStatus.CANCELLED: [],
}

TERMINAL_STATES: FrozenSet[TicketStatus] = frozenset(
    status for status, targets in VALID_TRANSITIONS.items() if not targets
)

# States nothing can leave, not even the return flow
CLOSED_STATES: FrozenSet[TicketStatus] = frozenset({TicketStatus.RETURNED, TicketStatus.CANCELLED})


def _as_status(value: Union[TicketStatus, str]) -> TicketStatus:
    return value if isinstance(value, TicketStatus) else TicketStatus(value)


def is_valid_transition(current: Union[TicketStatus, str], target: Union[TicketStatus, str]) -> bool:
    """Check if target is a listed successor of current"""
    return _as_status(target) in VALID_TRANSITIONS.get(_as_status(current), [])


def get_allowed_transitions(current: Union[TicketStatus, str]) -> List[TicketStatus]:
    """Get valid successor states (copy, safe to mutate)"""
    return list(VALID_TRANSITIONS.get(_as_status(current), []))


def is_terminal(status: Union[TicketStatus, str]) -> bool:
    return _as_status(status) in TERMINAL_STATES


STATUS_DISPLAY: Dict[TicketStatus, StatusDisplayInfo] = {
    TicketStatus.RECEIVED: StatusDisplayInfo(
        label="Received", color="blue", description="Device handed in, ticket created"
    ),
    TicketStatus.IN_PROGRESS: StatusDisplayInfo(
        label="In Progress", color="yellow", description="Technician has begun diagnostics/repair"
    ),
    TicketStatus.WAITING_FOR_PARTS: StatusDisplayInfo(
        label="Waiting for Parts", color="orange", description="Awaiting required inventory parts"
    ),
    TicketStatus.REPAIRED: StatusDisplayInfo(
        label="Repaired", color="green", description="Repair completed, awaiting pickup"
    ),
    TicketStatus.COMPLETED: StatusDisplayInfo(
        label="Completed", color="emerald", description="Device picked up by customer"
    ),
    TicketStatus.RETURNED: StatusDisplayInfo(
        label="Returned", color="purple", description="Customer returned repaired device"
    ),
    TicketStatus.CANCELLED: StatusDisplayInfo(
        label="Cancelled", color="red", description="Job aborted"
    ),
}


def get_status_display_info(status: Union[TicketStatus, str]) -> StatusDisplayInfo:
    """Get label/color/description for a status; unknown values render as gray"""
    try:
        return STATUS_DISPLAY[_as_status(status)]
    except ValueError:
        return StatusDisplayInfo(label=str(status), color="gray", description="")
