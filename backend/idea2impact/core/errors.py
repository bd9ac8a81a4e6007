"""Error taxonomy for the registration workflow."""
from typing import List, Optional


class RegistrationError(Exception):
    """Base class for failures reported back to the caller."""

    kind = "RegistrationError"
    user_message = "Internal Server Error during registration"


class ValidationError(RegistrationError):
    """Raised when a submission is missing or has malformed required fields."""

    kind = "ValidationError"
    user_message = "Please fill in all required fields"

    def __init__(self, fields: List[str], message: Optional[str] = None):
        self.fields = list(fields)
        super().__init__(message or f"Missing or invalid fields: {', '.join(self.fields)}")


class PersistenceError(RegistrationError):
    """Raised when the store is unreachable or rejects a write."""

    kind = "PersistenceError"
    user_message = "Could not save your registration. Please try again later."


class DeliveryError(RegistrationError):
    """Raised when the notification email could not be delivered."""

    kind = "DeliveryError"
    user_message = "Registration saved, but the confirmation email could not be sent."

    def __init__(self, message: str, registration=None):
        super().__init__(message)
        self.registration = registration


class DeliveryAuthenticationError(DeliveryError):
    """The relay rejected our credentials."""

    kind = "AuthenticationError"
    user_message = "Registration saved, but the mail server rejected our credentials."


class DeliveryConnectionError(DeliveryError):
    """The relay could not be reached or dropped the connection."""

    kind = "ConnectionError"
    user_message = "Registration saved, but the mail server could not be reached."


class DeliveryTimeoutError(DeliveryError):
    """The relay did not answer within the configured timeout."""

    kind = "TimeoutError"
    user_message = "Registration saved, but the mail server timed out."


class GenericDeliveryError(DeliveryError):
    kind = "GenericDeliveryError"
