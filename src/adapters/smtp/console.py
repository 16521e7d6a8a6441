"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging outgoing messages for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - every send succeeds.
    """

    def send(self, recipient: str, subject: str, body: str) -> None:
        """
        Log the message to console (simulates email delivery).

        The message is logged at INFO level to be visible in docker-compose logs.

        Args:
            recipient: Destination address
            subject: Message subject line
            body: Plain-text body
        """
        logger.info("[EMAIL] To: %s Subject: %s\n%s", recipient, subject, body)
