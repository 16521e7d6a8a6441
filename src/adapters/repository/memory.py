"""
In-memory repository adapter - Implements RegistrationRepository protocol.

Process-local store for development and tests. A single lock makes every
operation atomic, which gives create() the same uniqueness guarantee the
PostgreSQL UNIQUE constraint provides.
"""

import itertools
import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from src.domain.exceptions import DuplicateEmail
from src.domain.models import (
    AffiliationCount,
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


class InMemoryRegistrationRepository:
    """
    Implements RegistrationRepository protocol with plain dicts.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._registrations: dict[int, Registration] = {}
        self._ids_by_email: dict[str, int] = {}
        self._log: list[NotificationLogEntry] = []
        self._registration_ids = itertools.count(1)
        self._log_ids = itertools.count(1)
        self._last_timestamp = datetime.min.replace(tzinfo=timezone.utc)

    def create(self, registration: NewRegistration) -> Registration:
        with self._lock:
            if registration.email in self._ids_by_email:
                raise DuplicateEmail(registration.email)
            now = self._now()
            stored = Registration(
                id=next(self._registration_ids),
                full_name=registration.full_name,
                email=registration.email,
                affiliation=registration.affiliation,
                phone=registration.phone,
                research_interests=registration.research_interests,
                days=registration.days,
                registration_status=RegistrationStatus.ACTIVE,
                payment_status=PaymentStatus.PENDING,
                email_sent=False,
                email_sent_at=None,
                notes=None,
                created_at=now,
                updated_at=now,
            )
            self._registrations[stored.id] = stored
            self._ids_by_email[stored.email] = stored.id
            return stored

    def get(self, registration_id: int) -> Registration | None:
        with self._lock:
            return self._registrations.get(registration_id)

    def get_by_email(self, email: str) -> Registration | None:
        with self._lock:
            registration_id = self._ids_by_email.get(email)
            return self._registrations.get(registration_id) if registration_id else None

    def list_all(self) -> list[Registration]:
        return self._select(lambda r: True)

    def list_by_day(self, day: AttendanceDay) -> list[Registration]:
        return self._select(lambda r: day in r.days)

    def list_by_status(self, status: RegistrationStatus) -> list[Registration]:
        return self._select(lambda r: r.registration_status == status)

    def stats(self) -> RegistrationStats:
        with self._lock:
            registrations = list(self._registrations.values())
            today = datetime.now(timezone.utc).date()

        affiliations: dict[str, int] = {}
        for registration in registrations:
            affiliations[registration.affiliation] = (
                affiliations.get(registration.affiliation, 0) + 1
            )

        return RegistrationStats(
            total=len(registrations),
            today=sum(1 for r in registrations if r.created_at.date() == today),
            emails_sent=sum(1 for r in registrations if r.email_sent),
            by_affiliation=[
                AffiliationCount(affiliation=name, count=count)
                for name, count in sorted(affiliations.items(), key=lambda kv: (-kv[1], kv[0]))
            ],
            by_day={day: sum(1 for r in registrations if day in r.days) for day in AttendanceDay},
        )

    def update_registration_status(
        self, registration_id: int, status: RegistrationStatus, notes: str | None
    ) -> Registration | None:
        with self._lock:
            current = self._registrations.get(registration_id)
            if current is None:
                return None
            updated = replace(
                current,
                registration_status=status,
                notes=notes if notes is not None else current.notes,
                updated_at=self._now(),
            )
            self._registrations[registration_id] = updated
            return updated

    def update_payment_status(
        self, registration_id: int, status: PaymentStatus
    ) -> Registration | None:
        with self._lock:
            current = self._registrations.get(registration_id)
            if current is None:
                return None
            updated = replace(current, payment_status=status, updated_at=self._now())
            self._registrations[registration_id] = updated
            return updated

    def record_notification(
        self,
        registration_id: int,
        kind: NotificationKind,
        recipient: str,
        outcome: NotificationOutcome,
    ) -> NotificationLogEntry:
        with self._lock:
            entry = NotificationLogEntry(
                id=next(self._log_ids),
                registration_id=registration_id,
                kind=kind,
                recipient=recipient,
                outcome=outcome.status,
                error=outcome.error,
                created_at=self._now(),
            )
            self._log.append(entry)
            current = self._registrations.get(registration_id)
            if outcome.success and kind == NotificationKind.CONFIRMATION and current is not None:
                self._registrations[registration_id] = replace(
                    current, email_sent=True, email_sent_at=entry.created_at
                )
            return entry

    def list_notifications(self, registration_id: int) -> list[NotificationLogEntry]:
        with self._lock:
            return [entry for entry in self._log if entry.registration_id == registration_id]

    def _select(self, predicate) -> list[Registration]:
        with self._lock:
            matches = [r for r in self._registrations.values() if predicate(r)]
        return sorted(matches, key=lambda r: (r.created_at, r.id), reverse=True)

    def _now(self) -> datetime:
        # Strictly increasing, so updated_at always moves forward. Caller holds the lock.
        now = datetime.now(timezone.utc)
        if now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now
