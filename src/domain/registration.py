"""
Registration domain service - intake lifecycle and administrative updates.

Intake Lifecycle
================

    validate -> duplicate pre-check -> insert -> confirmation email
             -> notification log (+ email_sent flag) -> admin email -> result

Guarantees:
- Validation failures are raised before the store is touched.
- The pre-check is advisory. The store's unique constraint on email is the
  authoritative duplicate guard; a lost race surfaces as DuplicateEmail.
- Persistence succeeding is the definition of registration success.
  Notification outcomes are reported through email_sent and the
  notification log, never as exceptions.
- The admin email is fire-and-forget: its outcome is logged at process
  level only and is not written to the notification log.
"""

import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass

from .exceptions import DuplicateEmail, InvalidStatus, RegistrationNotFound, StoreFailure
from .models import (
    AttendanceDay,
    NotificationKind,
    NotificationLogEntry,
    NotificationOutcome,
    PaymentStatus,
    RawRegistration,
    Registration,
    RegistrationResult,
    RegistrationStats,
    RegistrationStatus,
)
from .notification import ConfirmationNotifier
from .ports import RegistrationRepository
from .validation import normalize_email, validate_registration

logger = logging.getLogger(__name__)


def _parse_status(enum_cls, value: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidStatus(value, [member.value for member in enum_cls]) from None


@dataclass
class RegistrationService:
    """
    Domain service for conference registration.

    Orchestrates intake (validation, duplicate detection, persistence,
    best-effort notification) and the administrative read/update operations.
    """

    repository: RegistrationRepository
    notifier: ConfirmationNotifier
    admin_dispatcher: Executor | None = None

    def register(self, raw: RawRegistration) -> RegistrationResult:
        """
        Register a new attendee.

        Args:
            raw: Intake fields as submitted

        Returns:
            RegistrationResult with the new id and whether the confirmation
            email was delivered

        Raises:
            ValidationError: MissingField, NoDaySelected, InvalidDayToken or
                InvalidEmailFormat; nothing was stored
            DuplicateEmail: The normalized email is already registered
            StoreFailure: Unexpected persistence error
        """
        new_registration = validate_registration(raw)

        if self.repository.get_by_email(new_registration.email) is not None:
            raise DuplicateEmail(new_registration.email)

        registration = self.repository.create(new_registration)
        logger.info("Registration %s created for %s", registration.id, registration.email)

        outcome = self.notifier.send_confirmation(registration)
        self._record(registration, NotificationKind.CONFIRMATION, registration.email, outcome)

        self._dispatch_admin_notification(registration)

        return RegistrationResult(registration_id=registration.id, email_sent=outcome.success)

    def resend_confirmation(self, registration_id: int) -> NotificationOutcome:
        """
        Operator-triggered single resend of the confirmation email.

        Appends a new log entry; never retries on its own.
        """
        registration = self.get_registration(registration_id)
        outcome = self.notifier.send_confirmation(registration)
        self._record(registration, NotificationKind.CONFIRMATION, registration.email, outcome)
        return outcome

    def get_registration(self, registration_id: int) -> Registration:
        registration = self.repository.get(registration_id)
        if registration is None:
            raise RegistrationNotFound(registration_id)
        return registration

    def get_registration_by_email(self, email: str) -> Registration:
        """Look up by email; the argument is normalized first."""
        registration = self.repository.get_by_email(normalize_email(email))
        if registration is None:
            raise RegistrationNotFound(email)
        return registration

    def list_registrations(self) -> list[Registration]:
        return self.repository.list_all()

    def get_statistics(self) -> RegistrationStats:
        return self.repository.stats()

    def list_day_registrations(self, day: AttendanceDay) -> list[Registration]:
        return self.repository.list_by_day(day)

    def list_by_registration_status(self, status: str) -> list[Registration]:
        """
        Raises:
            InvalidStatus: status is not a RegistrationStatus value
        """
        return self.repository.list_by_status(_parse_status(RegistrationStatus, status))

    def notification_history(self, registration_id: int) -> list[NotificationLogEntry]:
        self.get_registration(registration_id)
        return self.repository.list_notifications(registration_id)

    def set_registration_status(
        self, registration_id: int, status: str, notes: str | None = None
    ) -> Registration:
        """
        Overwrite the registration status (last writer wins).

        Args:
            registration_id: Target registration
            status: One of RegistrationStatus values
            notes: Replaces stored notes when given; None keeps them

        Raises:
            InvalidStatus: Unknown status; nothing was changed
            RegistrationNotFound: Unknown id
        """
        parsed = _parse_status(RegistrationStatus, status)
        updated = self.repository.update_registration_status(registration_id, parsed, notes)
        if updated is None:
            raise RegistrationNotFound(registration_id)
        logger.info("Registration %s status set to %s", registration_id, parsed.value)
        return updated

    def set_payment_status(self, registration_id: int, status: str) -> Registration:
        """
        Overwrite the payment status (last writer wins).

        Raises:
            InvalidStatus: Unknown status; nothing was changed
            RegistrationNotFound: Unknown id
        """
        parsed = _parse_status(PaymentStatus, status)
        updated = self.repository.update_payment_status(registration_id, parsed)
        if updated is None:
            raise RegistrationNotFound(registration_id)
        logger.info("Registration %s payment set to %s", registration_id, parsed.value)
        return updated

    def _record(
        self,
        registration: Registration,
        kind: NotificationKind,
        recipient: str,
        outcome: NotificationOutcome,
    ) -> None:
        # The registration already exists; a log write failure must not undo that.
        try:
            self.repository.record_notification(registration.id, kind, recipient, outcome)
        except StoreFailure:
            logger.exception(
                "Could not record %s notification for registration %s", kind.value, registration.id
            )

    def _dispatch_admin_notification(self, registration: Registration) -> None:
        if self.admin_dispatcher is None:
            _log_admin_outcome(registration, self.notifier.send_admin_notification(registration))
            return
        try:
            future = self.admin_dispatcher.submit(
                self.notifier.send_admin_notification, registration
            )
        except RuntimeError as e:
            # Dispatcher already shut down; the registration itself stands
            logger.error(
                "Admin notification for registration %s not scheduled: %s", registration.id, e
            )
            return
        future.add_done_callback(lambda f: _log_admin_future(registration, f))


def _log_admin_outcome(registration: Registration, outcome: NotificationOutcome) -> None:
    if not outcome.success:
        logger.warning(
            "Admin notification for registration %s failed: %s", registration.id, outcome.error
        )


def _log_admin_future(registration: Registration, future: Future) -> None:
    error = future.exception()
    if error is not None:
        logger.error("Admin notification for registration %s raised: %s", registration.id, error)
        return
    _log_admin_outcome(registration, future.result())
