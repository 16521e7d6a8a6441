"""
Best-effort notification - confirmation and admin emails.

Rendering is deterministic: the same registration and event details always
produce the same subject and body. Delivery is attempted exactly once; any
failure is converted into a NotificationOutcome instead of propagating.
"""

import logging
from dataclasses import dataclass

from .models import NotificationOutcome, Registration
from .ports import EmailSender

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "not configured"


@dataclass(frozen=True)
class EventDetails:
    """Event facts quoted in outgoing messages."""

    name: str
    dates: str
    venue: str
    contact_email: str


@dataclass(frozen=True)
class EmailContent:
    subject: str
    body: str


def render_confirmation(registration: Registration, event: EventDetails) -> EmailContent:
    """Build the attendee-facing confirmation message."""
    lines = [
        f"Dear {registration.full_name},",
        "",
        f"Thank you for registering for {event.name}!",
        "",
        "Event Details:",
        f"- Dates: {event.dates}",
        f"- Venue: {event.venue}",
        "",
        "Your Registration:",
        f"- Registration ID: {registration.id}",
        f"- Name: {registration.full_name}",
        f"- Email: {registration.email}",
        f"- Affiliation: {registration.affiliation}",
    ]
    if registration.phone:
        lines.append(f"- Phone: {registration.phone}")
    if registration.research_interests:
        lines.append(f"- Research Interests: {registration.research_interests}")
    lines.append(f"- Registration Date: {registration.created_at:%B %d, %Y}")
    lines += ["", "Days you will attend:"]
    for day in sorted(registration.days, key=lambda d: d.number):
        lines.append(f"- {day.label}: {day.programme}")
    lines += [
        "",
        "We look forward to seeing you!",
        "",
        f"Contact us: {event.contact_email}",
        "",
        "Best regards,",
        f"{event.name} Organizing Committee",
    ]
    return EmailContent(
        subject=f"{event.name} - Registration Confirmed",
        body="\n".join(lines),
    )


def render_admin_notification(registration: Registration, event: EventDetails) -> EmailContent:
    """Build the message telling organizers about a new sign-up."""
    body = "\n".join(
        [
            f"New Registration for {event.name}",
            "",
            f"Registration ID: {registration.id}",
            f"Name: {registration.full_name}",
            f"Email: {registration.email}",
            f"Affiliation: {registration.affiliation}",
            f"Phone: {registration.phone or 'Not provided'}",
            f"Research Interests: {registration.research_interests or 'Not provided'}",
            f"Selected Days: {', '.join(registration.day_labels)}",
            f"Registration Time: {registration.created_at:%Y-%m-%d %H:%M:%S %Z}".rstrip(),
        ]
    )
    return EmailContent(subject=f"New Registration - {event.name}", body=body)


@dataclass
class ConfirmationNotifier:
    """
    Dispatches registration emails through an optional EmailSender.

    A missing sender is a recognized state ("not configured"), distinct
    from a transmission failure. Neither raises.
    """

    email_sender: EmailSender | None
    event: EventDetails
    admin_email: str | None = None

    def send_confirmation(self, registration: Registration) -> NotificationOutcome:
        """
        Send the confirmation email to the attendee, once.

        Returns:
            NotificationOutcome with success=False and the error message when
            no channel is configured or delivery raised
        """
        if self.email_sender is None:
            logger.info("Confirmation not sent to %s: email %s", registration.email, NOT_CONFIGURED)
            return NotificationOutcome(success=False, error=NOT_CONFIGURED)
        content = render_confirmation(registration, self.event)
        return self._deliver(registration.email, content)

    def send_admin_notification(self, registration: Registration) -> NotificationOutcome:
        """Tell the organizers about a new registration, once."""
        if self.email_sender is None or not self.admin_email:
            return NotificationOutcome(success=False, error=NOT_CONFIGURED)
        content = render_admin_notification(registration, self.event)
        return self._deliver(self.admin_email, content)

    def _deliver(self, recipient: str, content: EmailContent) -> NotificationOutcome:
        try:
            self.email_sender.send(recipient, content.subject, content.body)
        except Exception as e:
            error = str(e) or e.__class__.__name__
            logger.warning("Email to %s failed: %s", recipient, error)
            return NotificationOutcome(success=False, error=error)
        logger.info("Email sent to %s: %s", recipient, content.subject)
        return NotificationOutcome(success=True)
