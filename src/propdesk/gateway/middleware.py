"""Authorization gateway and the ASGI middleware that runs it."""

from fastapi.responses import RedirectResponse
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Receive, Scope, Send

from propdesk.core.config import GatewayConfig
from propdesk.core.logging import bind_session_context, get_logger
from propdesk.gateway.decision import Decision, Redirect, decide
from propdesk.gateway.paths import RouteAllowList, classify
from propdesk.gateway.session import KeyProvider, SessionTokenReader

logger = get_logger(__name__)


class Gateway:
    """Reads the session, classifies the path and decides what happens to the request."""

    def __init__(self, config: GatewayConfig, key_provider: KeyProvider):
        self.config = config
        self.allow_list = RouteAllowList.from_patterns(config.route_allow_list)
        self.reader = SessionTokenReader(config, key_provider)

    def covers(self, path: str) -> bool:
        """Pre-filter: whether the gateway runs for this path at all."""
        return self.allow_list.matches(path)

    async def handle(self, conn: HTTPConnection) -> Decision:
        """
        Decide the fate of one request.

        The verified session is recorded on request.state.session so pages
        further down can use the caller's identity.
        """
        info = await self.reader.read(conn)
        conn.state.session = info
        bind_session_context(info.state.value, info.claims.user_id if info.claims else None)

        path = conn.url.path
        path_class = classify(path, self.config)
        decision = decide(info.state, path_class, path, self.config, query=conn.url.query)

        if isinstance(decision, Redirect):
            logger.info(
                "gateway.redirect",
                path=path,
                state=info.state.value,
                path_class=path_class.value,
                location=decision.location,
            )
        return decision


class AuthGatewayMiddleware:
    """
    Two-stage request pipeline in front of the pages.

    Stage one is the allow-list membership test; requests outside it go
    straight to the app without the session ever being read. Stage two runs
    the gateway and either continues or answers with a redirect.
    """

    def __init__(self, app: ASGIApp, gateway: Gateway):
        self.app = app
        self.gateway = gateway

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.gateway.covers(scope["path"]):
            await self.app(scope, receive, send)
            return

        decision = await self.gateway.handle(HTTPConnection(scope))

        if isinstance(decision, Redirect):
            response = RedirectResponse(url=decision.location)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
