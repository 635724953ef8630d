"""Sentry context middleware to capture request context in error reports."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from propdesk.core.logging import get_request_id
from propdesk.gateway.session import SessionInfo


class SentryContextMiddleware:
    """
    Middleware to inject structured context into Sentry error reports.

    Captures:
    - request_id: set by RequestIDMiddleware, which runs first
    - user_id / organization_id: from the session the gateway verified (allow-listed paths only)
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = get_request_id()
        sentry_sdk.set_tag("request_id", request_id)

        session = scope.get("state", {}).get("session")
        if isinstance(session, SessionInfo) and session.claims and session.claims.user_id:
            sentry_sdk.set_user({"id": session.claims.user_id})
            sentry_sdk.set_tag("session_state", session.state.value)
            if session.claims.organization_id:
                sentry_sdk.set_tag("organization_id", session.claims.organization_id)

        sentry_sdk.set_context(
            "request",
            {
                "method": scope.get("method"),
                "path": scope.get("path"),
                "request_id": request_id,
            },
        )

        await self.app(scope, receive, send)
