"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Intake fields are deliberately loose (optional strings): the domain
validator owns the rules so each failure gets its specific message.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.models import (
    NotificationLogEntry,
    RawRegistration,
    Registration,
    RegistrationStats,
)


class RegisterRequest(BaseModel):
    """Request model for attendee registration."""

    full_name: str | None = Field(None, description="Attendee full name")
    email: str | None = Field(None, description="Contact email (unique per attendee)")
    affiliation: str | None = Field(None, description="Institution or organization")
    phone: str | None = None
    interests: str | None = Field(None, description="Research interests")
    selected_days: list[str] | None = Field(
        None, description="Days to attend, drawn from day1..day5", examples=[["day1", "day3"]]
    )

    def to_domain(self) -> RawRegistration:
        return RawRegistration(
            full_name=self.full_name,
            email=self.email,
            affiliation=self.affiliation,
            phone=self.phone,
            interests=self.interests,
            selected_days=self.selected_days,
        )


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    success: bool = True
    message: str
    registration_id: int
    email_sent: bool


class RegistrationSummary(BaseModel):
    """Public view returned by lookup-by-email."""

    id: int
    full_name: str
    email: str
    affiliation: str
    registration_date: datetime
    email_sent: bool
    selected_days: list[str] = Field(..., examples=[["Day 1 - Nov 10"]])

    @classmethod
    def from_domain(cls, registration: Registration) -> "RegistrationSummary":
        return cls(
            id=registration.id,
            full_name=registration.full_name,
            email=registration.email,
            affiliation=registration.affiliation,
            registration_date=registration.created_at,
            email_sent=registration.email_sent,
            selected_days=registration.day_labels,
        )


class LookupResponse(BaseModel):
    success: bool = True
    registration: RegistrationSummary


class RegistrationRecord(BaseModel):
    """Full administrative view of a registration."""

    id: int
    full_name: str
    email: str
    affiliation: str
    phone: str | None
    research_interests: str | None
    selected_days: list[str]
    registration_status: str
    payment_status: str
    email_sent: bool
    email_sent_at: datetime | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, registration: Registration) -> "RegistrationRecord":
        return cls(
            id=registration.id,
            full_name=registration.full_name,
            email=registration.email,
            affiliation=registration.affiliation,
            phone=registration.phone,
            research_interests=registration.research_interests,
            selected_days=[day.value for day in sorted(registration.days, key=lambda d: d.number)],
            registration_status=registration.registration_status.value,
            payment_status=registration.payment_status.value,
            email_sent=registration.email_sent,
            email_sent_at=registration.email_sent_at,
            notes=registration.notes,
            created_at=registration.created_at,
            updated_at=registration.updated_at,
        )


class AffiliationCountModel(BaseModel):
    affiliation: str
    count: int


class StatsModel(BaseModel):
    """Aggregate registration statistics."""

    total: int
    today: int
    emails_sent: int
    by_affiliation: list[AffiliationCountModel]
    by_day: dict[str, int] = Field(..., examples=[{"day1": 12, "day2": 9}])

    @classmethod
    def from_domain(cls, stats: RegistrationStats) -> "StatsModel":
        return cls(
            total=stats.total,
            today=stats.today,
            emails_sent=stats.emails_sent,
            by_affiliation=[
                AffiliationCountModel(affiliation=a.affiliation, count=a.count)
                for a in stats.by_affiliation
            ],
            by_day={day.value: count for day, count in stats.by_day.items()},
        )


class StatsResponse(BaseModel):
    success: bool = True
    stats: StatsModel


class AdminRegistrationsResponse(BaseModel):
    success: bool = True
    registrations: list[RegistrationRecord]
    stats: StatsModel


class DayAttendee(BaseModel):
    id: int
    full_name: str
    email: str
    affiliation: str


class DayRegistrationsResponse(BaseModel):
    success: bool = True
    day: int
    count: int
    registrations: list[DayAttendee]


class RegistrationListResponse(BaseModel):
    success: bool = True
    count: int
    registrations: list[RegistrationRecord]


class StatusUpdateRequest(BaseModel):
    """Request model for registration status changes."""

    status: str = Field(..., description="active, cancelled, waitlist, confirmed or completed")
    notes: str | None = Field(None, description="Replaces stored notes; omit to keep them")


class PaymentUpdateRequest(BaseModel):
    """Request model for payment status changes."""

    status: str = Field(..., description="pending, paid, refunded or waived")


class UpdateResponse(BaseModel):
    success: bool = True
    message: str


class NotificationLogModel(BaseModel):
    id: int
    kind: str
    recipient: str
    outcome: str
    error: str | None
    created_at: datetime

    @classmethod
    def from_domain(cls, entry: NotificationLogEntry) -> "NotificationLogModel":
        return cls(
            id=entry.id,
            kind=entry.kind.value,
            recipient=entry.recipient,
            outcome=entry.outcome.value,
            error=entry.error,
            created_at=entry.created_at,
        )


class NotificationHistoryResponse(BaseModel):
    success: bool = True
    count: int
    notifications: list[NotificationLogModel]


class ResendResponse(BaseModel):
    success: bool = True
    message: str
    email_sent: bool


class ErrorResponse(BaseModel):
    """Standard error response model."""

    success: bool = False
    detail: str
