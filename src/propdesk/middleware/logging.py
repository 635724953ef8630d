"""Request id propagation and the request.start / request.complete log pair."""

import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from propdesk.core.logging import get_logger, start_request_context

REQUEST_ID_HEADER = b"x-request-id"


class RequestIDMiddleware:
    """
    Outermost middleware: gives each HTTP request an id before the gateway runs.

    A caller-supplied X-Request-ID is reused, otherwise a UUID4 is minted.
    The id goes back out on every response, gateway redirects included.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = dict(scope.get("headers", [])).get(REQUEST_ID_HEADER)
        request_id = incoming.decode("latin1") if incoming else str(uuid.uuid4())
        start_request_context(request_id)

        self.logger.info("request.start", method=scope["method"], path=scope["path"])

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (REQUEST_ID_HEADER, request_id.encode("latin1")),
                ]
                self.logger.info("request.complete", status_code=message.get("status"))

            await send(message)

        await self.app(scope, receive, send_with_request_id)
