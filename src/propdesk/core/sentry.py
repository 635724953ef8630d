"""Sentry error tracking configuration and initialization."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from propdesk.core.logging import get_logger

logger = get_logger(__name__)

# Guard against multiple initializations
_sentry_initialized = False

SCRUBBED = "[Filtered]"
_SENSITIVE_HEADERS = {"authorization", "cookie"}


def init_sentry() -> None:
    """
    Initialize Sentry SDK for error tracking.

    Only initializes if SENTRY_DSN environment variable is set and looks valid
    (placeholder values in CI are ignored). Safe to call more than once.

    Configuration:
    - Performance monitoring disabled
    - No default PII; session tokens are scrubbed from request data
    - Logging integration disabled to avoid duplication with structlog
    """
    global _sentry_initialized

    if _sentry_initialized:
        return

    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info("sentry.disabled", message="Sentry DSN not found, error tracking disabled")
        return

    sentry_dsn_stripped = sentry_dsn.strip()
    if not sentry_dsn_stripped.startswith(("https://", "http://")):
        logger.info(
            "sentry.disabled",
            message="Sentry DSN appears to be invalid or placeholder, error tracking disabled",
            dsn_preview=sentry_dsn_stripped[:20] + "..." if len(sentry_dsn_stripped) > 20 else sentry_dsn_stripped,
        )
        return

    environment = os.getenv("ENVIRONMENT", "development")

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),
            ],
            before_send=filter_session_tokens,
        )

        _sentry_initialized = True
        logger.info(
            "sentry.initialized", message="Sentry error tracking enabled", environment=environment
        )
    except BadDsn as exc:
        logger.warning(
            "sentry.init_failed",
            message="Failed to initialize Sentry due to invalid DSN, error tracking disabled",
            error=str(exc),
        )


def filter_session_tokens(event: dict, hint: dict) -> dict:
    """Remove cookies, Authorization headers and password-reset tokens from Sentry events."""
    request = event.get("request")
    if not isinstance(request, dict):
        return event

    if "cookies" in request:
        request["cookies"] = SCRUBBED

    headers = request.get("headers")
    if isinstance(headers, dict):
        request["headers"] = {
            key: SCRUBBED if str(key).lower() in _SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }

    # /reset-password/<token> carries a secret in the path
    url = request.get("url")
    if isinstance(url, str) and "/reset-password/" in url:
        request["url"] = url.split("/reset-password/", 1)[0] + "/reset-password/" + SCRUBBED

    return event
