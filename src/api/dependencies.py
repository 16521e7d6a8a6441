"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache

from fastapi import Depends, Request

from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.smtp import SmtpEmailSender
from src.config.settings import Settings, get_settings
from src.domain.notification import ConfirmationNotifier, EventDetails
from src.domain.ports import EmailSender, RegistrationRepository
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)


def build_email_sender(settings: Settings) -> EmailSender | None:
    """
    Select the email adapter from settings.

    Returns None (notifications "not configured") when email is disabled
    or SMTP credentials are missing.
    """
    if settings.email_backend == "console":
        return ConsoleEmailSender()
    if settings.email_backend == "smtp":
        if not settings.smtp_username or not settings.smtp_password:
            logger.warning("SMTP not configured: missing SMTP_USERNAME or SMTP_PASSWORD")
            return None
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            sender=settings.smtp_from or settings.smtp_username,
            timeout=settings.smtp_timeout_seconds,
        )
    logger.info("Email delivery disabled; registrations will not be confirmed by email")
    return None


def build_notifier(settings: Settings) -> ConfirmationNotifier:
    return ConfirmationNotifier(
        email_sender=build_email_sender(settings),
        event=EventDetails(
            name=settings.event_name,
            dates=settings.event_dates,
            venue=settings.event_venue,
            contact_email=settings.contact_email,
        ),
        admin_email=settings.admin_email,
    )


@lru_cache
def get_notifier() -> ConfirmationNotifier:
    """Get notifier built from settings (singleton)."""
    return build_notifier(get_settings())


@lru_cache
def get_admin_dispatcher() -> ThreadPoolExecutor:
    """Executor for fire-and-forget admin emails (singleton, shut down in lifespan)."""
    return ThreadPoolExecutor(
        max_workers=get_settings().admin_notification_workers,
        thread_name_prefix="admin-notify",
    )


def get_repository(request: Request) -> RegistrationRepository:
    """
    Get repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_registration_service(
    repository: RegistrationRepository = Depends(get_repository),
    notifier: ConfirmationNotifier = Depends(get_notifier),
    admin_dispatcher: ThreadPoolExecutor = Depends(get_admin_dispatcher),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, notifier and admin dispatcher.
    """
    return RegistrationService(
        repository=repository,
        notifier=notifier,
        admin_dispatcher=admin_dispatcher,
    )
