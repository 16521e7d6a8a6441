"""
Domain models - Registration records, notification log entries and enums.

Closed enumerations use the str mixin so values serialize to JSON as plain
strings and compare equal to their raw database values.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class AttendanceDay(str, Enum):
    """
    The five event days an attendee can select.

    Each day has a fixed calendar label and a programme title used when
    rendering lookups and confirmation emails.
    """

    DAY1 = "day1"
    DAY2 = "day2"
    DAY3 = "day3"
    DAY4 = "day4"
    DAY5 = "day5"

    @property
    def number(self) -> int:
        return int(self.value[3:])

    @property
    def label(self) -> str:
        """Human-readable rendering, e.g. 'Day 1 - Nov 10'."""
        return _DAY_LABELS[self]

    @property
    def programme(self) -> str:
        return _DAY_PROGRAMME[self]

    @classmethod
    def from_number(cls, number: int) -> "AttendanceDay":
        """
        Look up a day by its 1-based number.

        Raises:
            ValueError: If number is outside 1..5
        """
        return cls(f"day{number}")


_DAY_LABELS = {
    AttendanceDay.DAY1: "Day 1 - Nov 10",
    AttendanceDay.DAY2: "Day 2 - Nov 11",
    AttendanceDay.DAY3: "Day 3 - Nov 12",
    AttendanceDay.DAY4: "Day 4 - Nov 13",
    AttendanceDay.DAY5: "Day 5 - Nov 14",
}

_DAY_PROGRAMME = {
    AttendanceDay.DAY1: "Opening Ceremonies & Keynote Speakers",
    AttendanceDay.DAY2: "Students' Research Contest",
    AttendanceDay.DAY3: "Residents' Research Contest",
    AttendanceDay.DAY4: "Faculty Research Forum",
    AttendanceDay.DAY5: "Innovation Seminar & Culminating Activity",
}


class RegistrationStatus(str, Enum):
    """Administrative lifecycle of a registration (soft delete via CANCELLED)."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    WAITLIST = "waitlist"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    WAIVED = "waived"


class NotificationKind(str, Enum):
    CONFIRMATION = "confirmation"
    ADMIN = "admin"


class NotificationStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class RawRegistration:
    """Intake fields exactly as submitted, before validation."""

    full_name: str | None = None
    email: str | None = None
    affiliation: str | None = None
    phone: str | None = None
    interests: str | None = None
    selected_days: list[str] | None = None


@dataclass(frozen=True)
class NewRegistration:
    """Validated and normalized intake payload, ready to be persisted."""

    full_name: str
    email: str
    affiliation: str
    days: frozenset[AttendanceDay]
    phone: str | None = None
    research_interests: str | None = None


@dataclass(frozen=True)
class Registration:
    """A persisted registration as read back from the store."""

    id: int
    full_name: str
    email: str
    affiliation: str
    phone: str | None
    research_interests: str | None
    days: frozenset[AttendanceDay]
    registration_status: RegistrationStatus
    payment_status: PaymentStatus
    email_sent: bool
    email_sent_at: datetime | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    @property
    def day_labels(self) -> list[str]:
        """Selected days in calendar order, rendered for display."""
        return [day.label for day in sorted(self.days, key=lambda d: d.number)]


@dataclass(frozen=True)
class NotificationLogEntry:
    """One append-only record of a notification attempt."""

    id: int
    registration_id: int
    kind: NotificationKind
    recipient: str
    outcome: NotificationStatus
    error: str | None
    created_at: datetime


@dataclass(frozen=True)
class NotificationOutcome:
    """Result of a single delivery attempt; never raised, always returned."""

    success: bool
    error: str | None = None

    @property
    def status(self) -> NotificationStatus:
        return NotificationStatus.SENT if self.success else NotificationStatus.FAILED


@dataclass(frozen=True)
class RegistrationResult:
    """Caller-visible outcome of a successful intake."""

    registration_id: int
    email_sent: bool


@dataclass(frozen=True)
class AffiliationCount:
    affiliation: str
    count: int


@dataclass(frozen=True)
class RegistrationStats:
    """Aggregate counts for the administrative dashboard."""

    total: int
    today: int
    emails_sent: int
    by_affiliation: list[AffiliationCount] = field(default_factory=list)
    by_day: dict[AttendanceDay, int] = field(default_factory=dict)
