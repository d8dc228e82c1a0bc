"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base error for the repair desk core; carries a stable code and context"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Error as a plain dict for logs and callers"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Permission Errors
class AuthorizationError(DomainError):
    """Actor may not perform the requested change"""
    error_code = "AUTHORIZATION_ERROR"
    http_status = 403


class TransitionDeniedError(AuthorizationError):
    """Status change refused by the transition guard"""
    error_code = "TRANSITION_DENIED"

    def __init__(
        self,
        message: str,
        reason_code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        merged = {"reason_code": reason_code}
        merged.update(details or {})
        super().__init__(message, details=merged)
        self.reason_code = reason_code


# Validation Errors
class ValidationError(DomainError):
    """Submitted data is not acceptable"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


# Not Found Errors
class NotFoundError(DomainError):
    """Referenced record does not exist"""
    error_code = "NOT_FOUND"
    http_status = 404


class TicketNotFoundError(NotFoundError):
    """Ticket not found"""
    error_code = "TICKET_NOT_FOUND"


# Conflict Errors
class ConflictError(DomainError):
    """Write refused because stored state moved on"""
    error_code = "CONFLICT"
    http_status = 409


class ConcurrencyError(ConflictError):
    """Ticket changed between read and write (version mismatch)"""
    error_code = "CONCURRENCY_CONFLICT"


class InvalidStateError(ConflictError):
    """Operation not valid for the ticket's current status"""
    error_code = "INVALID_STATE"


# Delivery Errors
class ExternalServiceError(DomainError):
    """A backing store or channel failed"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 502


class NotificationDeliveryError(ExternalServiceError):
    """A notification channel failed to deliver"""
    error_code = "NOTIFICATION_DELIVERY_ERROR"
