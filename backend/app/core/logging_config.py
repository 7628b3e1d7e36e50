"""
Logging configuration: console output plus optional GELF shipping to Graylog.
The account being seeded is attached to every GELF message as context.
"""

import logging
import json
import socket
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

current_seed_email: ContextVar[Optional[str]] = ContextVar('current_seed_email', default=None)

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class GELFFormatter(logging.Formatter):
    """Formats records as GELF 1.1 JSON messages."""

    def __init__(self, facility: str = "admin-seed"):
        super().__init__()
        self.hostname = socket.gethostname()
        self.facility = facility

    def format(self, record):
        gelf_message = {
            "version": "1.1",
            "host": self.hostname,
            "short_message": record.getMessage(),
            "timestamp": record.created,
            "level": self._level_to_gelf(record.levelno),
            "facility": self.facility,
            "_logger": record.name,
            "_filename": record.filename,
            "_line": record.lineno,
        }

        if current_seed_email.get():
            gelf_message["_seed_email"] = current_seed_email.get()

        if record.exc_info:
            gelf_message["_exception"] = self.formatException(record.exc_info)

        return json.dumps(gelf_message)

    def _level_to_gelf(self, level):
        """Convert Python log level to syslog severity."""
        mapping = {
            logging.DEBUG: 7,
            logging.INFO: 6,
            logging.WARNING: 4,
            logging.ERROR: 3,
            logging.CRITICAL: 2
        }
        return mapping.get(level, 6)


class GELFHandler(logging.Handler):
    """Sends GELF messages to Graylog via UDP."""

    def __init__(self, graylog_host: str, graylog_port: int = 12201):
        super().__init__()
        self.graylog_host = graylog_host
        self.graylog_port = graylog_port
        self.setFormatter(GELFFormatter())

    def emit(self, record):
        try:
            payload = self.format(record).encode('utf-8')
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.sendto(payload, (self.graylog_host, self.graylog_port))
        except Exception:
            # Graylog being down must not break the run
            self.handleError(record)


@contextmanager
def seed_context(email: str) -> Iterator[None]:
    """Tag log messages emitted inside the block with the seeded email."""
    token = current_seed_email.set(email)
    try:
        yield
    finally:
        current_seed_email.reset(token)


def setup_logging(level: str = "INFO", graylog_host: Optional[str] = None, graylog_port: int = 12201):
    """Configure the root logger for a command-line run."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

    if graylog_host and not any(isinstance(h, GELFHandler) for h in root_logger.handlers):
        gelf_handler = GELFHandler(graylog_host, graylog_port)
        gelf_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(gelf_handler)
