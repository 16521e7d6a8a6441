"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers plain-text messages over SMTP. Port 465 uses implicit TLS,
any other port upgrades with STARTTLS. Every connection carries a socket
timeout so a stalled server cannot block intake indefinitely.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage

from src.domain.exceptions import NotificationFailure

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    One connection per message; no retries.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._sender = sender
        self._timeout = timeout

    def send(self, recipient: str, subject: str, body: str) -> None:
        """
        Send one message.

        Raises:
            NotificationFailure: On any SMTP or network error (including timeout)
        """
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._sender
        msg["To"] = recipient
        msg.set_content(body)

        context = ssl.create_default_context()
        try:
            if self._port == 465:
                with smtplib.SMTP_SSL(
                    self._host, self._port, timeout=self._timeout, context=context
                ) as s:
                    s.login(self._username, self._password)
                    s.send_message(msg)
            else:
                with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as s:
                    s.starttls(context=context)
                    s.login(self._username, self._password)
                    s.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationFailure(f"SMTP delivery to {recipient} failed: {e}") from e

        logger.debug("SMTP message accepted for %s", recipient)
