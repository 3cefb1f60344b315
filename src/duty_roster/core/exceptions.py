class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a user or duty document does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotificationError(DomainError):
    """Raised when an SMS could not be handed to the messaging provider."""
