"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration lifecycle for the conference
registration service. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    DuplicateEmail,
    InvalidDayToken,
    InvalidEmailFormat,
    InvalidStatus,
    MissingField,
    NoDaySelected,
    NotificationFailure,
    RegistrationError,
    RegistrationNotFound,
    StoreFailure,
    ValidationError,
)
from .models import (
    AttendanceDay,
    NotificationKind,
    NotificationStatus,
    PaymentStatus,
    RawRegistration,
    Registration,
    RegistrationStatus,
)
from .notification import ConfirmationNotifier, EventDetails
from .ports import EmailSender, RegistrationRepository
from .registration import RegistrationService
from .validation import validate_registration

__all__ = [
    "AttendanceDay",
    "ConfirmationNotifier",
    "DuplicateEmail",
    "EmailSender",
    "EventDetails",
    "InvalidDayToken",
    "InvalidEmailFormat",
    "InvalidStatus",
    "MissingField",
    "NoDaySelected",
    "NotificationFailure",
    "NotificationKind",
    "NotificationStatus",
    "PaymentStatus",
    "RawRegistration",
    "Registration",
    "RegistrationError",
    "RegistrationNotFound",
    "RegistrationRepository",
    "RegistrationService",
    "RegistrationStatus",
    "StoreFailure",
    "ValidationError",
    "validate_registration",
]
