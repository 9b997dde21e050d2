"""
Error types for the authentication service.

ValidationError is the only error meant for the caller: it carries a
human message plus a field -> message mapping that the HTTP layer returns
verbatim. Store errors are translated by the service and never leave it.
"""
from typing import Dict, Optional


class ValidationError(Exception):
    """User-correctable failure tied to one or more input fields."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    @property
    def field(self) -> Optional[str]:
        return next(iter(self.details), None)


class DuplicateEmail(ValidationError):
    """Raised by register when the email is already in use."""

    def __init__(self, email: str):
        super().__init__(
            "An account already exists with the email address",
            {"email": "Email address already taken"},
        )
        self.email = email


class ConstraintViolation(Exception):
    """Store-level uniqueness constraint failure."""

    def __init__(self, field: str, value: str):
        super().__init__(f"Unique constraint violated on {field}")
        self.field = field
        self.value = value


class NotFound(Exception):
    """Store-level lookup miss."""

    def __init__(self, key: str):
        super().__init__(f"No user found for {key}")
        self.key = key
