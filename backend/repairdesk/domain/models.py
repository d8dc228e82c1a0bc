"""Domain Models - Pydantic schemas for all entities"""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .enums import (
    TicketStatus, UserRole, TransitionDenialCode, EntityType, EventAction,
    LegacyNotificationType
)

CENTS = Decimal("0.01")


def round_money(amount: float) -> float:
    """Round a money amount to whole cents"""
    return float(Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP))


# ============================================================================
# Actor
# ============================================================================

class ActorContext(BaseModel):
    """Authenticated principal performing an operation"""
    model_config = ConfigDict(extra="forbid")

    user_id: str = Field(..., description="User ID")
    display_name: str = Field(..., description="User display name")
    role: UserRole = Field(..., description="Shop role")


# ============================================================================
# Transition Guard
# ============================================================================

class PaymentStatus(BaseModel):
    """Payment position of a ticket at decision time"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    paid: bool = False
    outstanding_amount: float = Field(default=0, description="Amount still owed")


class TransitionRequest(BaseModel):
    """A single attempted status change (never persisted)"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    current_state: TicketStatus
    target_state: TicketStatus
    actor_role: UserRole
    payment_status: Optional[PaymentStatus] = None


class TransitionDecision(BaseModel):
    """Outcome of the transition guard"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    allowed: bool
    reason_code: TransitionDenialCode = TransitionDenialCode.NONE
    human_reason: str = ""
    allowed_targets: List[TicketStatus] = Field(
        default_factory=list,
        description="Valid successors, populated for INVALID_TRANSITION"
    )

    @classmethod
    def allow(cls) -> "TransitionDecision":
        return cls(allowed=True)

    @classmethod
    def deny(
        cls,
        reason_code: TransitionDenialCode,
        human_reason: str,
        allowed_targets: Optional[List[TicketStatus]] = None
    ) -> "TransitionDecision":
        return cls(
            allowed=False,
            reason_code=reason_code,
            human_reason=human_reason,
            allowed_targets=allowed_targets or []
        )


class ReturnWindowCheck(BaseModel):
    """Whether a completed ticket may still enter the return flow"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    allowed: bool
    reason: Optional[str] = None


class StatusDisplayInfo(BaseModel):
    """UI label and color for a status"""
    model_config = ConfigDict(frozen=True)

    label: str
    color: str
    description: str = ""


# ============================================================================
# Ticket
# ============================================================================

class DeviceInfo(BaseModel):
    """Device handed in for repair"""
    model_config = ConfigDict(extra="ignore", frozen=True)

    brand: Optional[str] = None
    model: Optional[str] = None
    issue: Optional[str] = None

    def display_name(self) -> str:
        """'brand model' with missing parts dropped"""
        return " ".join(part for part in (self.brand, self.model) if part)


class TicketSnapshot(BaseModel):
    """Ticket fields the lifecycle and notification core reads"""
    model_config = ConfigDict(extra="ignore")

    ticket_id: str
    ticket_number: Optional[str] = None
    status: TicketStatus
    assigned_to_id: Optional[str] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    device: Optional[DeviceInfo] = None
    final_price: float = 0
    amount_paid: float = 0
    completed_at: Optional[datetime] = None
    version: int = 1
    updated_at: Optional[datetime] = None

    def payment_status(self) -> PaymentStatus:
        """Derive payment position from price and payments received"""
        outstanding = max(round_money(self.final_price - self.amount_paid), 0)
        return PaymentStatus(paid=outstanding == 0, outstanding_amount=outstanding)


# ============================================================================
# Events
# ============================================================================

class EventPayload(BaseModel):
    """
    One domain occurrence. Created once by the caller and consumed
    exactly once by the notification pipeline.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    event_id: str = Field(..., description="Unique per occurrence")
    entity_type: EntityType
    entity_id: str
    action: EventAction
    actor_id: str
    actor_name: str
    timestamp: datetime
    summary: str
    details: Optional[str] = None
    meta: Dict[str, Any] = Field(default_factory=dict)
    customer_id: Optional[str] = None
    ticket_id: Optional[str] = None
    device: Optional[DeviceInfo] = None

    @property
    def event_type(self) -> str:
        """Dotted 'entity.action' name"""
        return f"{self.entity_type.value}.{self.action.value}"

    @property
    def related_ticket_id(self) -> Optional[str]:
        """Ticket this event concerns, if any"""
        if self.ticket_id:
            return self.ticket_id
        if self.entity_type == EntityType.TICKET:
            return self.entity_id
        return None


# ============================================================================
# Recipients & Preferences
# ============================================================================

class NotificationPreference(BaseModel):
    """Per-user opt-out row for one (entity_type, action) pair"""
    model_config = ConfigDict(extra="ignore")

    user_id: str
    entity_type: EntityType
    action: EventAction
    enabled: bool = True
    updated_at: Optional[datetime] = None


class PreferenceUpdate(BaseModel):
    """One preference toggle submitted from settings"""
    model_config = ConfigDict(extra="forbid")

    entity_type: EntityType
    action: EventAction
    enabled: bool


class RosterEntry(BaseModel):
    """A user with the preference row matching one event type (if any)"""
    model_config = ConfigDict(extra="ignore")

    user_id: str
    role: UserRole
    locale: Optional[str] = None
    preference: Optional[NotificationPreference] = None


# ============================================================================
# Delivery
# ============================================================================

class TranslatedNotification(BaseModel):
    """Event expressed in the legacy notification taxonomy"""
    model_config = ConfigDict(frozen=True)

    category: LegacyNotificationType
    message: str
    user_id: str
    ticket_id: Optional[str] = None


class NotificationRecord(BaseModel):
    """In-app notification written once per (event, recipient)"""
    model_config = ConfigDict(extra="ignore")

    notification_id: str
    type: LegacyNotificationType
    message: str
    user_id: str
    ticket_id: Optional[str] = None
    event_id: str
    channel: str
    idempotency_key: str
    is_read: bool = False
    created_at: datetime


class DeliveryLogEntry(BaseModel):
    """One delivery attempt (append-only)"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    event_id: str
    entity_type: EntityType
    action: EventAction
    recipient_id: str
    channel: str
    success: bool
    error: Optional[str] = None
    timestamp: datetime


class MetricsSnapshot(BaseModel):
    """Running delivery counters"""
    model_config = ConfigDict(frozen=True)

    sent: int = 0
    failed: int = 0
    dropped: int = Field(default=0, description="Events discarded before processing")
