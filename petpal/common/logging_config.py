"""
Structured logging configuration for PetPal.
JSON or console output on stdout, with a session id bound per game.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

import structlog


class JSONFormatter(logging.Formatter):
    """JSON formatter for stdlib log records."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, 'session_id'):
            log_entry['session_id'] = record.session_id

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    level: str = "INFO",
    enable_json: bool = True,
    session_id: Optional[str] = None
) -> None:
    """Configure stdlib logging and structlog for the process."""

    logging.root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)

    if enable_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
        )

    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper()))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if enable_json else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if session_id:
        structlog.contextvars.bind_contextvars(session_id=session_id)


def new_session_id() -> str:
    return str(uuid4())


def bind_session_id(session_id: str = None) -> str:
    """Bind a session id to the current logging context."""
    if not session_id:
        session_id = new_session_id()

    structlog.contextvars.bind_contextvars(session_id=session_id)
    return session_id
