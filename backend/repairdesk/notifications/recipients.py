"""Recipient Resolver - Who should hear about an event"""
from typing import Dict, List, Optional

from ..domain.models import EventPayload, RosterEntry
from ..domain.enums import EntityType, UserRole
from ..repositories.user_repo import UserRepository
from ..repositories.ticket_repo import TicketRepository
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Roles that see every entity type
SHOP_MANAGER_ROLES = frozenset({UserRole.ADMIN, UserRole.STAFF})

# Entity types every manager is always told about, preferences aside
MANAGER_BROADCAST_ENTITY_TYPES = frozenset({EntityType.CUSTOMER, EntityType.PAYMENT})


class RecipientResolver:
    """
    Resolve the distinct recipients of an event

    Preferences are opt-out: users without a row for the event type are
    notified. The assigned technician of the event's ticket always hears
    about it, and customer/payment events always reach every ADMIN and
    STAFF user. The actor is never notified of their own action.
    """

    def __init__(
        self,
        user_repo: Optional[UserRepository] = None,
        ticket_repo: Optional[TicketRepository] = None
    ):
        self._user_repo = user_repo if user_repo is not None else UserRepository()
        self._ticket_repo = ticket_repo if ticket_repo is not None else TicketRepository()

    async def resolve(self, event: EventPayload) -> List[str]:
        """Distinct recipient ids"""
        return list((await self.resolve_with_locales(event)).keys())

    async def resolve_with_locales(self, event: EventPayload) -> Dict[str, Optional[str]]:
        """Distinct recipient ids mapped to their preferred locale (None if unset)"""
        roster = await self._user_repo.get_roster_with_preferences(event.entity_type, event.action)
        assigned_to_id = await self._get_assigned_technician(event)

        recipients: Dict[str, Optional[str]] = {}

        for entry in roster:
            if entry.user_id == event.actor_id:
                continue
            if entry.preference is not None and not entry.preference.enabled:
                continue
            if entry.role in SHOP_MANAGER_ROLES:
                recipients[entry.user_id] = entry.locale

        # Other roles only hear about tickets assigned to them, opt-out or not
        if assigned_to_id and assigned_to_id != event.actor_id:
            recipients.setdefault(assigned_to_id, self._locale_of(roster, assigned_to_id))

        if event.entity_type in MANAGER_BROADCAST_ENTITY_TYPES:
            for entry in roster:
                if entry.role in SHOP_MANAGER_ROLES and entry.user_id != event.actor_id:
                    recipients.setdefault(entry.user_id, entry.locale)

        logger.debug(
            f"Resolved {len(recipients)} recipients for {event.event_type}",
            extra={"event_id": event.event_id, "recipient_count": len(recipients)}
        )
        return recipients

    async def _get_assigned_technician(self, event: EventPayload) -> Optional[str]:
        ticket_id = event.related_ticket_id
        if not ticket_id:
            return None
        ticket = await self._ticket_repo.get_ticket(ticket_id)
        if not ticket:
            logger.warning(
                "Event references unknown ticket",
                extra={"event_id": event.event_id, "ticket_id": ticket_id}
            )
            return None
        return ticket.assigned_to_id

    @staticmethod
    def _locale_of(roster: List[RosterEntry], user_id: str) -> Optional[str]:
        for entry in roster:
            if entry.user_id == user_id:
                return entry.locale
        return None
