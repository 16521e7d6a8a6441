"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A recording fake EmailSender that can be told to fail
- In-memory repository and a fully wired RegistrationService
- Raw intake payloads and stored registration records
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest

from src.adapters.repository.memory import InMemoryRegistrationRepository
from src.domain.exceptions import NotificationFailure
from src.domain.models import (
    AttendanceDay,
    PaymentStatus,
    RawRegistration,
    Registration,
    RegistrationStatus,
)
from src.domain.notification import ConfirmationNotifier, EventDetails
from src.domain.registration import RegistrationService


@dataclass
class SentEmail:
    recipient: str
    subject: str
    body: str


@dataclass
class RecordingEmailSender:
    """Fake EmailSender: records messages, optionally fails for some recipients."""

    fail_for: set[str] = field(default_factory=set)
    fail_all: bool = False
    sent: list[SentEmail] = field(default_factory=list)

    def send(self, recipient: str, subject: str, body: str) -> None:
        if self.fail_all or recipient in self.fail_for:
            raise NotificationFailure(f"connection refused for {recipient}")
        self.sent.append(SentEmail(recipient, subject, body))


@pytest.fixture
def event() -> EventDetails:
    return EventDetails(
        name="Research Week 2025",
        dates="November 10-14, 2025",
        venue="Villarosa Hall",
        contact_email="researchweek@example.org",
    )


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def notifier(email_sender: RecordingEmailSender, event: EventDetails) -> ConfirmationNotifier:
    return ConfirmationNotifier(
        email_sender=email_sender, event=event, admin_email="admin@example.org"
    )


@pytest.fixture
def memory_repository() -> InMemoryRegistrationRepository:
    return InMemoryRegistrationRepository()


@pytest.fixture
def service(
    memory_repository: InMemoryRegistrationRepository, notifier: ConfirmationNotifier
) -> RegistrationService:
    """Service with synchronous admin notifications (no dispatcher)."""
    return RegistrationService(repository=memory_repository, notifier=notifier)


@pytest.fixture
def make_raw():
    """Factory for valid raw payloads; keyword overrides replace fields."""

    def _make(**overrides) -> RawRegistration:
        fields = {
            "full_name": "Ada Lovelace",
            "email": "ada@example.com",
            "affiliation": "Analytical Society",
            "phone": "555-0100",
            "interests": "Computing",
            "selected_days": ["day1", "day3"],
        }
        fields.update(overrides)
        return RawRegistration(**fields)

    return _make


@pytest.fixture
def make_registration():
    """Factory for stored Registration records."""

    def _make(**overrides) -> Registration:
        created = datetime(2025, 11, 1, 9, 30, tzinfo=timezone.utc)
        fields = {
            "id": 1,
            "full_name": "Ada Lovelace",
            "email": "ada@example.com",
            "affiliation": "Analytical Society",
            "phone": "555-0100",
            "research_interests": "Computing",
            "days": frozenset({AttendanceDay.DAY1, AttendanceDay.DAY3}),
            "registration_status": RegistrationStatus.ACTIVE,
            "payment_status": PaymentStatus.PENDING,
            "email_sent": True,
            "email_sent_at": created,
            "notes": None,
            "created_at": created,
            "updated_at": created,
        }
        fields.update(overrides)
        return Registration(**fields)

    return _make
