"""
PostgreSQL repository adapter - Implements RegistrationRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Uniqueness Design
-----------------
Email uniqueness is enforced by the UNIQUE constraint on registrations.email.
create() uses INSERT ... ON CONFLICT (email) DO NOTHING RETURNING, so a
concurrent duplicate returns no row instead of raising, and is reported as
DuplicateEmail. The service's pre-insert lookup is advisory only.

The notification log entry and the email_sent flag are written in the same
transaction, so email_sent = TRUE always has a matching 'sent' entry.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.exceptions import DuplicateEmail, StoreFailure
from src.domain.models import (
    AffiliationCount,
    AttendanceDay,
    NewRegistration,
    NotificationKind,
    NotificationLogEntry,
    NotificationOutcome,
    NotificationStatus,
    PaymentStatus,
    Registration,
    RegistrationStats,
    RegistrationStatus,
)

logger = logging.getLogger(__name__)

_DAY_COLUMNS = [day.value for day in AttendanceDay]

_REGISTRATION_COLUMNS = """
    id, full_name, email, affiliation, phone, research_interests,
    day1, day2, day3, day4, day5,
    registration_status, payment_status, email_sent, email_sent_at,
    notes, created_at, updated_at
"""

_LOG_COLUMNS = "id, registration_id, kind, recipient, outcome, error_message, created_at"


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate psycopg errors into StoreFailure without leaking details."""
    try:
        yield
    except psycopg.Error as e:
        logger.exception("Database error during %s", operation)
        raise StoreFailure(f"Store operation failed: {operation}") from e


def _to_registration(row: dict[str, Any]) -> Registration:
    return Registration(
        id=row["id"],
        full_name=row["full_name"],
        email=row["email"],
        affiliation=row["affiliation"],
        phone=row["phone"],
        research_interests=row["research_interests"],
        days=frozenset(day for day in AttendanceDay if row[day.value]),
        registration_status=RegistrationStatus(row["registration_status"]),
        payment_status=PaymentStatus(row["payment_status"]),
        email_sent=row["email_sent"],
        email_sent_at=row["email_sent_at"],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _to_log_entry(row: dict[str, Any]) -> NotificationLogEntry:
    return NotificationLogEntry(
        id=row["id"],
        registration_id=row["registration_id"],
        kind=NotificationKind(row["kind"]),
        recipient=row["recipient"],
        outcome=NotificationStatus(row["outcome"]),
        error=row["error_message"],
        created_at=row["created_at"],
    )


class PostgresRegistrationRepository:
    """
    Implements RegistrationRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def create(self, registration: NewRegistration) -> Registration:
        """
        Insert a registration, relying on the UNIQUE(email) constraint.

        Raises:
            DuplicateEmail: If the email is already registered
            StoreFailure: Any other database error
        """
        sql = f"""
            INSERT INTO registrations
                (full_name, email, affiliation, phone, research_interests,
                 day1, day2, day3, day4, day5)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_REGISTRATION_COLUMNS}
        """
        params = (
            registration.full_name,
            registration.email,
            registration.affiliation,
            registration.phone,
            registration.research_interests,
            *(day in registration.days for day in AttendanceDay),
        )

        with _store_errors("create"):
            try:
                with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                    cursor.execute(sql, params)
                    row = cursor.fetchone()
                    conn.commit()
            except psycopg.errors.UniqueViolation:
                raise DuplicateEmail(registration.email) from None

        # No row returned means ON CONFLICT skipped the insert
        if row is None:
            raise DuplicateEmail(registration.email)
        return _to_registration(row)

    def get(self, registration_id: int) -> Registration | None:
        sql = f"SELECT {_REGISTRATION_COLUMNS} FROM registrations WHERE id = %s"
        return self._fetch_one("get", sql, (registration_id,))

    def get_by_email(self, email: str) -> Registration | None:
        sql = f"SELECT {_REGISTRATION_COLUMNS} FROM registrations WHERE email = %s"
        return self._fetch_one("get_by_email", sql, (email,))

    def list_all(self) -> list[Registration]:
        sql = f"SELECT {_REGISTRATION_COLUMNS} FROM registrations ORDER BY created_at DESC, id DESC"
        return self._fetch_all("list_all", sql, ())

    def list_by_day(self, day: AttendanceDay) -> list[Registration]:
        # Column name comes from the closed AttendanceDay enum, never from input
        sql = f"""
            SELECT {_REGISTRATION_COLUMNS} FROM registrations
            WHERE {day.value} = TRUE
            ORDER BY created_at DESC, id DESC
        """
        return self._fetch_all("list_by_day", sql, ())

    def list_by_status(self, status: RegistrationStatus) -> list[Registration]:
        sql = f"""
            SELECT {_REGISTRATION_COLUMNS} FROM registrations
            WHERE registration_status = %s
            ORDER BY created_at DESC, id DESC
        """
        return self._fetch_all("list_by_status", sql, (status.value,))

    def stats(self) -> RegistrationStats:
        day_counts = ",\n".join(
            f"COUNT(*) FILTER (WHERE {column}) AS {column}" for column in _DAY_COLUMNS
        )
        totals_sql = f"""
            SELECT
                COUNT(*) AS total,
                COUNT(*) FILTER (WHERE created_at::date = CURRENT_DATE) AS today,
                COUNT(*) FILTER (WHERE email_sent) AS emails_sent,
                {day_counts}
            FROM registrations
        """
        affiliation_sql = """
            SELECT affiliation, COUNT(*) AS count
            FROM registrations
            GROUP BY affiliation
            ORDER BY count DESC, affiliation
        """

        with _store_errors("stats"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(totals_sql)
                totals = cursor.fetchone()
                cursor.execute(affiliation_sql)
                affiliations = cursor.fetchall()
                conn.commit()

        return RegistrationStats(
            total=totals["total"],
            today=totals["today"],
            emails_sent=totals["emails_sent"],
            by_affiliation=[
                AffiliationCount(affiliation=row["affiliation"], count=row["count"])
                for row in affiliations
            ],
            by_day={day: totals[day.value] for day in AttendanceDay},
        )

    def update_registration_status(
        self, registration_id: int, status: RegistrationStatus, notes: str | None
    ) -> Registration | None:
        """
        Overwrite registration_status; COALESCE keeps notes when None is given.
        """
        sql = f"""
            UPDATE registrations
            SET registration_status = %s,
                notes = COALESCE(%s, notes),
                updated_at = NOW()
            WHERE id = %s
            RETURNING {_REGISTRATION_COLUMNS}
        """
        return self._fetch_one(
            "update_registration_status", sql, (status.value, notes, registration_id)
        )

    def update_payment_status(
        self, registration_id: int, status: PaymentStatus
    ) -> Registration | None:
        sql = f"""
            UPDATE registrations
            SET payment_status = %s,
                updated_at = NOW()
            WHERE id = %s
            RETURNING {_REGISTRATION_COLUMNS}
        """
        return self._fetch_one("update_payment_status", sql, (status.value, registration_id))

    def record_notification(
        self,
        registration_id: int,
        kind: NotificationKind,
        recipient: str,
        outcome: NotificationOutcome,
    ) -> NotificationLogEntry:
        """
        Append a log entry; a sent confirmation also flags the registration.

        Both statements run in one transaction.
        """
        insert_sql = f"""
            INSERT INTO notification_log
                (registration_id, kind, recipient, outcome, error_message)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING {_LOG_COLUMNS}
        """
        mark_sent_sql = """
            UPDATE registrations
            SET email_sent = TRUE, email_sent_at = %s
            WHERE id = %s
        """

        with _store_errors("record_notification"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(
                    insert_sql,
                    (registration_id, kind.value, recipient, outcome.status.value, outcome.error),
                )
                row = cursor.fetchone()
                if outcome.success and kind == NotificationKind.CONFIRMATION:
                    cursor.execute(mark_sent_sql, (row["created_at"], registration_id))
                conn.commit()

        return _to_log_entry(row)

    def list_notifications(self, registration_id: int) -> list[NotificationLogEntry]:
        sql = f"""
            SELECT {_LOG_COLUMNS} FROM notification_log
            WHERE registration_id = %s
            ORDER BY id
        """
        with _store_errors("list_notifications"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, (registration_id,))
                rows = cursor.fetchall()
                conn.commit()
        return [_to_log_entry(row) for row in rows]

    def _fetch_one(self, operation: str, sql: str, params: tuple) -> Registration | None:
        with _store_errors(operation):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
        return _to_registration(row) if row is not None else None

    def _fetch_all(self, operation: str, sql: str, params: tuple) -> list[Registration]:
        with _store_errors(operation):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                rows = cursor.fetchall()
                conn.commit()
        return [_to_registration(row) for row in rows]


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
