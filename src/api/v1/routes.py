"""
API v1 routes.

Defines REST endpoints for attendee intake, lookup and the administrative
read/update surface. Handlers are plain functions: the service performs
blocking database and SMTP I/O, which FastAPI runs in its threadpool.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_registration_service
from src.api.models import (
    AdminRegistrationsResponse,
    DayAttendee,
    DayRegistrationsResponse,
    ErrorResponse,
    LookupResponse,
    NotificationHistoryResponse,
    NotificationLogModel,
    PaymentUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    RegistrationListResponse,
    RegistrationRecord,
    RegistrationSummary,
    ResendResponse,
    StatsModel,
    StatsResponse,
    StatusUpdateRequest,
    UpdateResponse,
)
from src.domain.exceptions import (
    DuplicateEmail,
    InvalidStatus,
    RegistrationNotFound,
    ValidationError,
)
from src.domain.models import AttendanceDay
from src.domain.registration import RegistrationService

router = APIRouter(tags=["v1"])

_NOT_FOUND = "Registration not found"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)


def _bad_request(error: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid registration data"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        500: {"model": ErrorResponse, "description": "Registration could not be stored"},
    },
    summary="Register an attendee",
    description="Submit attendee details and at least one attendance day. "
    "A confirmation email is attempted once; registration succeeds even if it fails.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse:
    """
    Register an attendee and send a confirmation email.

    - **full_name**, **email**, **affiliation**: required
    - **selected_days**: non-empty list drawn from day1..day5

    Returns the new registration id and whether the confirmation was delivered.
    """
    try:
        result = service.register(request_data.to_domain())
    except ValidationError as e:
        raise _bad_request(e) from None
    except DuplicateEmail:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This email is already registered",
        ) from None
    return RegisterResponse(
        message="Registration successful! Please check your email for confirmation.",
        registration_id=result.registration_id,
        email_sent=result.email_sent,
    )


@router.get(
    "/registrations/status/{registration_status}",
    response_model=RegistrationListResponse,
    responses={400: {"model": ErrorResponse, "description": "Unknown status"}},
    summary="List registrations with a given status",
)
def list_by_status(
    registration_status: str,
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationListResponse:
    try:
        registrations = service.list_by_registration_status(registration_status)
    except InvalidStatus as e:
        raise _bad_request(e) from None
    return RegistrationListResponse(
        count=len(registrations),
        registrations=[RegistrationRecord.from_domain(r) for r in registrations],
    )


@router.get(
    "/registrations/{email}",
    response_model=LookupResponse,
    responses={404: {"model": ErrorResponse, "description": "Registration not found"}},
    summary="Look up a registration by email",
)
def get_registration(
    email: str,
    service: RegistrationService = Depends(get_registration_service),
) -> LookupResponse:
    try:
        registration = service.get_registration_by_email(email)
    except RegistrationNotFound:
        raise _not_found() from None
    return LookupResponse(registration=RegistrationSummary.from_domain(registration))


@router.put(
    "/registrations/{registration_id}/status",
    response_model=UpdateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Unknown status"},
        404: {"model": ErrorResponse, "description": "Registration not found"},
    },
    summary="Set registration status",
)
def update_registration_status(
    registration_id: int,
    request_data: StatusUpdateRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> UpdateResponse:
    try:
        service.set_registration_status(registration_id, request_data.status, request_data.notes)
    except InvalidStatus as e:
        raise _bad_request(e) from None
    except RegistrationNotFound:
        raise _not_found() from None
    return UpdateResponse(message="Status updated successfully")


@router.put(
    "/registrations/{registration_id}/payment",
    response_model=UpdateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Unknown payment status"},
        404: {"model": ErrorResponse, "description": "Registration not found"},
    },
    summary="Set payment status",
)
def update_payment_status(
    registration_id: int,
    request_data: PaymentUpdateRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> UpdateResponse:
    try:
        service.set_payment_status(registration_id, request_data.status)
    except InvalidStatus as e:
        raise _bad_request(e) from None
    except RegistrationNotFound:
        raise _not_found() from None
    return UpdateResponse(message="Payment status updated successfully")


@router.get(
    "/registrations/{registration_id}/notifications",
    response_model=NotificationHistoryResponse,
    responses={404: {"model": ErrorResponse, "description": "Registration not found"}},
    summary="Notification log of a registration",
)
def notification_history(
    registration_id: int,
    service: RegistrationService = Depends(get_registration_service),
) -> NotificationHistoryResponse:
    try:
        entries = service.notification_history(registration_id)
    except RegistrationNotFound:
        raise _not_found() from None
    return NotificationHistoryResponse(
        count=len(entries),
        notifications=[NotificationLogModel.from_domain(entry) for entry in entries],
    )


@router.post(
    "/registrations/{registration_id}/resend-confirmation",
    response_model=ResendResponse,
    responses={404: {"model": ErrorResponse, "description": "Registration not found"}},
    summary="Resend the confirmation email once",
)
def resend_confirmation(
    registration_id: int,
    service: RegistrationService = Depends(get_registration_service),
) -> ResendResponse:
    try:
        outcome = service.resend_confirmation(registration_id)
    except RegistrationNotFound:
        raise _not_found() from None
    if outcome.success:
        return ResendResponse(message="Confirmation email sent", email_sent=True)
    return ResendResponse(message=f"Confirmation email not sent: {outcome.error}", email_sent=False)


@router.get(
    "/admin/registrations",
    response_model=AdminRegistrationsResponse,
    summary="All registrations with statistics",
)
def admin_registrations(
    service: RegistrationService = Depends(get_registration_service),
) -> AdminRegistrationsResponse:
    registrations = service.list_registrations()
    stats = service.get_statistics()
    return AdminRegistrationsResponse(
        registrations=[RegistrationRecord.from_domain(r) for r in registrations],
        stats=StatsModel.from_domain(stats),
    )


@router.get("/stats", response_model=StatsResponse, summary="Registration statistics")
def statistics(
    service: RegistrationService = Depends(get_registration_service),
) -> StatsResponse:
    return StatsResponse(stats=StatsModel.from_domain(service.get_statistics()))


@router.get(
    "/days/{day_number}",
    response_model=DayRegistrationsResponse,
    responses={400: {"model": ErrorResponse, "description": "Day number outside 1-5"}},
    summary="Attendees registered for one day",
)
def day_registrations(
    day_number: int,
    service: RegistrationService = Depends(get_registration_service),
) -> DayRegistrationsResponse:
    try:
        day = AttendanceDay.from_number(day_number)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid day number. Must be between 1 and 5.",
        ) from None
    registrations = service.list_day_registrations(day)
    return DayRegistrationsResponse(
        day=day.number,
        count=len(registrations),
        registrations=[
            DayAttendee(id=r.id, full_name=r.full_name, email=r.email, affiliation=r.affiliation)
            for r in registrations
        ],
    )
