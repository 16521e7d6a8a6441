"""Process-wide logging setup."""

import logging
import sys


class AppLogHandler(logging.StreamHandler):
    """Stdout handler installed by configure_logging."""

    def __init__(self) -> None:
        super().__init__(sys.stdout)
        self.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stdout with timestamps."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Replace our own handler on repeated startup, leave others alone
    for existing in list(root.handlers):
        if isinstance(existing, AppLogHandler):
            root.removeHandler(existing)
    root.addHandler(AppLogHandler())

    # Silence noisy libraries
    logging.getLogger("psycopg.pool").setLevel(logging.WARNING)
