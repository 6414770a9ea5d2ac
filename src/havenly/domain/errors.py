"""Domain error taxonomy shared by services and routes."""


class HavenlyError(Exception):
    """Base class for all marketplace domain errors."""


class ValidationError(HavenlyError):
    """Raised for bad input: missing document, invalid dates, guest count, etc."""


class PaymentInProgressError(ValidationError):
    """Raised when a user already has a payment in flight."""


class PaymentError(HavenlyError):
    """Raised when the payment gateway declines, fails or times out.

    No charge was captured, so there is no payment reference to report.
    """


class AuthorizationError(HavenlyError):
    """Raised when the acting user lacks the role or ownership for an action."""


class NotFoundError(HavenlyError):
    """Raised when a referenced entity does not exist."""
