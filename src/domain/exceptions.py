"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class ValidationError(RegistrationError):
    """Intake payload is malformed; the caller can correct and resubmit."""

    pass


class MissingField(ValidationError):
    """A required field is absent or blank."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Full name, email, and affiliation are required (missing: {field})")
        self.field = field


class NoDaySelected(ValidationError):
    """No attendance day was selected."""

    def __init__(self) -> None:
        super().__init__("Please select at least one day to attend")


class InvalidDayToken(ValidationError):
    """A selected day is not one of day1..day5."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unrecognized attendance day: {token!r}")
        self.token = token


class InvalidEmailFormat(ValidationError):
    """Email does not look like local@domain.tld."""

    def __init__(self) -> None:
        super().__init__("Please provide a valid email address")


class DuplicateEmail(RegistrationError):
    """A registration already exists for this normalized email."""

    pass


class InvalidStatus(RegistrationError):
    """Status value is outside its fixed enumeration."""

    def __init__(self, value: str, allowed: list[str]) -> None:
        super().__init__(f"Invalid status {value!r}. Must be one of: {', '.join(allowed)}")
        self.value = value
        self.allowed = allowed


class RegistrationNotFound(RegistrationError):
    """No registration matches the given id or email."""

    pass


class StoreFailure(RegistrationError):
    """Unexpected persistence error; details stay in the logs."""

    pass


class NotificationFailure(RegistrationError):
    """Delivery failed. Absorbed by the notifier, never surfaced to callers."""

    pass
