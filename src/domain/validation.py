"""
Intake validation - pure checks and normalization of submitted fields.

Rules are checked in a fixed order and the first failure is raised:
required fields, then day selection, then email shape.
"""

import re

from .exceptions import InvalidDayToken, InvalidEmailFormat, MissingField, NoDaySelected
from .models import AttendanceDay, NewRegistration, RawRegistration

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_VALID_DAY_TOKENS = {day.value for day in AttendanceDay}


def normalize_email(email: str) -> str:
    """Applies: strip whitespace + lowercase"""
    return email.strip().lower()


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_registration(raw: RawRegistration) -> NewRegistration:
    """
    Validate and normalize an intake payload.

    Args:
        raw: Fields as submitted by the caller

    Returns:
        NewRegistration with trimmed strings, lower-cased email and
        de-duplicated day selection

    Raises:
        MissingField: full name, email or affiliation blank or absent
        NoDaySelected: day selection empty
        InvalidDayToken: a day outside day1..day5
        InvalidEmailFormat: email not shaped like local@domain.tld
    """
    full_name = _clean(raw.full_name)
    email = _clean(raw.email)
    affiliation = _clean(raw.affiliation)

    for name, value in (("full_name", full_name), ("email", email), ("affiliation", affiliation)):
        if value is None:
            raise MissingField(name)

    if not raw.selected_days:
        raise NoDaySelected()

    days = set()
    for token in raw.selected_days:
        # Tokens must match exactly; no trimming or case folding
        if token not in _VALID_DAY_TOKENS:
            raise InvalidDayToken(str(token))
        days.add(AttendanceDay(token))

    email = normalize_email(email)
    if not EMAIL_PATTERN.match(email):
        raise InvalidEmailFormat()

    return NewRegistration(
        full_name=full_name,
        email=email,
        affiliation=affiliation,
        days=frozenset(days),
        phone=_clean(raw.phone),
        research_interests=_clean(raw.interests),
    )
