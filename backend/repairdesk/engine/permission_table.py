"""Permission Table - Which role may perform which status transition"""
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from ..domain.enums import TicketStatus, UserRole
from .status_table import get_allowed_transitions

Edge = Tuple[TicketStatus, TicketStatus]

# None stands for "every edge"
ROLE_PERMISSIONS: Dict[UserRole, Optional[FrozenSet[Edge]]] = {
    UserRole.ADMIN: None,
    UserRole.STAFF: frozenset({
        (TicketStatus.RECEIVED, TicketStatus.IN_PROGRESS),
        (TicketStatus.RECEIVED, TicketStatus.CANCELLED),
        (TicketStatus.IN_PROGRESS, TicketStatus.WAITING_FOR_PARTS),
        (TicketStatus.IN_PROGRESS, TicketStatus.REPAIRED),
        (TicketStatus.IN_PROGRESS, TicketStatus.CANCELLED),
        (TicketStatus.WAITING_FOR_PARTS, TicketStatus.IN_PROGRESS),
        (TicketStatus.WAITING_FOR_PARTS, TicketStatus.REPAIRED),
        (TicketStatus.WAITING_FOR_PARTS, TicketStatus.CANCELLED),
        (TicketStatus.REPAIRED, TicketStatus.COMPLETED),
    }),
    # Technicians move work forward but never cancel or close out billing
    UserRole.TECHNICIAN: frozenset({
        (TicketStatus.RECEIVED, TicketStatus.IN_PROGRESS),
        (TicketStatus.IN_PROGRESS, TicketStatus.WAITING_FOR_PARTS),
        (TicketStatus.IN_PROGRESS, TicketStatus.REPAIRED),
        (TicketStatus.WAITING_FOR_PARTS, TicketStatus.IN_PROGRESS),
        (TicketStatus.WAITING_FOR_PARTS, TicketStatus.REPAIRED),
    }),
}


def _as_role(value: Union[UserRole, str]) -> Optional[UserRole]:
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole(value)
    except ValueError:
        return None


def has_permission(
    role: Union[UserRole, str],
    current: Union[TicketStatus, str],
    target: Union[TicketStatus, str]
) -> bool:
    """Check if role may perform the current -> target edge"""
    user_role = _as_role(role)
    if user_role is None or user_role not in ROLE_PERMISSIONS:
        return False

    edges = ROLE_PERMISSIONS[user_role]
    if edges is None:
        return True

    return (TicketStatus(current), TicketStatus(target)) in edges


def get_allowed_transitions_for_role(
    current: Union[TicketStatus, str],
    role: Union[UserRole, str]
) -> List[TicketStatus]:
    """Valid successors of current that role is permitted to perform"""
    return [
        target for target in get_allowed_transitions(current)
        if has_permission(role, current, target)
    ]
