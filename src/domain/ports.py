"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .models import (
    AttendanceDay,
    NewRegistration,
    NotificationKind,
    NotificationLogEntry,
    NotificationOutcome,
    PaymentStatus,
    Registration,
    RegistrationStats,
    RegistrationStatus,
)


class RegistrationRepository(Protocol):
    """
    Port interface for registration persistence.

    Implementations must enforce email uniqueness atomically: the
    pre-insert lookup done by the service is advisory only.
    Unexpected persistence errors are raised as StoreFailure.
    """

    def create(self, registration: NewRegistration) -> Registration:
        """
        Insert a new registration with default status fields.

        Args:
            registration: Validated, normalized payload

        Returns:
            The stored record, including id and created_at

        Raises:
            DuplicateEmail: If the unique email constraint rejects the insert
        """
        ...

    def get(self, registration_id: int) -> Registration | None:
        ...

    def get_by_email(self, email: str) -> Registration | None:
        """Look up by normalized email."""
        ...

    def list_all(self) -> list[Registration]:
        """All registrations, newest first."""
        ...

    def list_by_day(self, day: AttendanceDay) -> list[Registration]:
        ...

    def list_by_status(self, status: RegistrationStatus) -> list[Registration]:
        ...

    def stats(self) -> RegistrationStats:
        ...

    def update_registration_status(
        self, registration_id: int, status: RegistrationStatus, notes: str | None
    ) -> Registration | None:
        """
        Overwrite registration_status and bump updated_at.

        notes=None keeps the stored notes. Returns None if the id is unknown.
        """
        ...

    def update_payment_status(
        self, registration_id: int, status: PaymentStatus
    ) -> Registration | None:
        ...

    def record_notification(
        self,
        registration_id: int,
        kind: NotificationKind,
        recipient: str,
        outcome: NotificationOutcome,
    ) -> NotificationLogEntry:
        """
        Append one notification log entry.

        A successful CONFIRMATION also sets email_sent/email_sent_at on the
        registration, atomically with the log entry.
        """
        ...

    def list_notifications(self, registration_id: int) -> list[NotificationLogEntry]:
        """Log entries for one registration, oldest first."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send(self, recipient: str, subject: str, body: str) -> None:
        """
        Deliver one plain-text message.

        Args:
            recipient: Destination address
            subject: Message subject line
            body: Plain-text body

        Raises:
            NotificationFailure: If delivery fails
        """
        ...
