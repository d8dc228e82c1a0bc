"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class TicketStatus(str, Enum):
    """Repair ticket lifecycle state"""
    RECEIVED = "RECEIVED"  # Device handed in, ticket created
    IN_PROGRESS = "IN_PROGRESS"
    WAITING_FOR_PARTS = "WAITING_FOR_PARTS"
    REPAIRED = "REPAIRED"  # Repair done, awaiting pickup
    COMPLETED = "COMPLETED"  # Picked up by customer
    RETURNED = "RETURNED"  # Only reachable via the return approval flow
    CANCELLED = "CANCELLED"


class UserRole(str, Enum):
    """Shop user roles"""
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    TECHNICIAN = "TECHNICIAN"


class TransitionDenialCode(str, Enum):
    """Reason codes returned by the transition guard"""
    NONE = "NONE"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    TERMINAL_STATE = "TERMINAL_STATE"
    RETURN_FLOW_REQUIRED = "RETURN_FLOW_REQUIRED"


class EntityType(str, Enum):
    """Entity types that produce domain events"""
    CUSTOMER = "customer"
    TICKET = "ticket"
    PAYMENT = "payment"
    CHARGE = "charge"
    REPAIRJOB = "repairjob"
    PART = "part"
    SUPPLIER = "supplier"


class EventAction(str, Enum):
    """Actions recorded on domain events"""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    STATUS_CHANGED = "status_changed"
    ASSIGNED = "assigned"
    COMPLETED = "completed"
    USED = "used"
    REMOVED = "removed"
    ADDED = "added"


class LegacyNotificationType(str, Enum):
    """Notification categories understood by the inbox/storage layer"""
    TICKET_CREATED = "TICKET_CREATED"
    STATUS_CHANGE = "STATUS_CHANGE"
    ASSIGNMENT = "ASSIGNMENT"
    PRICE_ADJUSTMENT = "PRICE_ADJUSTMENT"
    PAYMENT_STATUS_CHANGE = "PAYMENT_STATUS_CHANGE"


class NotificationChannelName(str, Enum):
    """Delivery channels"""
    IN_APP = "in-app"
    EMAIL = "email"
    SMS = "sms"
