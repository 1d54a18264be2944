"""
Domain Exceptions

Every failure a service can report maps onto one HTTP status code.
Handlers in ``bistro.main`` render them into the standard response
envelope ``{"success": false, "message": ...}``.
"""

from typing import Optional


class BistroError(Exception):
    """Base class for all expected application errors."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BistroError):
    """Missing or malformed required field."""
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(BistroError):
    """Missing, invalid or expired credential."""
    status_code = 401
    default_message = "Not authorized to access this route"


class Forbidden(BistroError):
    """Authenticated, but not entitled to the resource."""
    status_code = 403
    default_message = "Not authorized to perform this action"


class NotFound(BistroError):
    status_code = 404
    default_message = "Resource not found"


class BusinessRuleError(BistroError):
    """A request that is well-formed but violates a business rule."""
    status_code = 400
    default_message = "Request violates a business rule"


class DuplicateUser(BusinessRuleError):
    default_message = "User with this mobile number already exists"


class ItemUnavailable(BusinessRuleError):
    default_message = "Menu item is currently not available"


class InvalidTransition(BusinessRuleError):
    default_message = "Order cannot be cancelled at this stage"


class InvalidStatus(BusinessRuleError):
    default_message = "Invalid status value"
