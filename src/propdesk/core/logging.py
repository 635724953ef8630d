"""structlog setup for PropDesk and the per-request log context.

Every line emitted while a request is in flight carries its request id and,
once the gateway has read the session, the session state and user id.
"""

import contextvars
import logging
import logging.config
from typing import Optional

import structlog

NO_REQUEST_ID = "no-request-id"

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default=NO_REQUEST_ID
)


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def start_request_context(request_id: str) -> None:
    """Drop whatever the previous request bound and start over with its id."""
    structlog.contextvars.clear_contextvars()
    set_request_id(request_id)


def bind_session_context(session_state: str, user_id: Optional[str] = None) -> None:
    """Attach the gateway's view of the caller to the rest of the request's log lines."""
    values = {"session_state": session_state}
    if user_id:
        values["user_id"] = user_id
    structlog.contextvars.bind_contextvars(**values)


def configure_logging(level: str = "INFO") -> None:
    """
    Application events render as JSON lines; records from stdlib loggers
    (uvicorn, starlette) keep the readable console format.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console = {
        "()": structlog.stdlib.ProcessorFormatter,
        "processor": structlog.dev.ConsoleRenderer(),
    }
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"console": console},
            "handlers": {
                "stdout": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "console",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["stdout"], "level": level},
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
