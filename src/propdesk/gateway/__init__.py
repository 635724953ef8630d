"""Request authorization gateway package."""

from propdesk.gateway.decision import Allow, Decision, Redirect, decide
from propdesk.gateway.middleware import AuthGatewayMiddleware, Gateway
from propdesk.gateway.paths import PathClass, RouteAllowList, classify
from propdesk.gateway.session import SessionClaims, SessionInfo, SessionState, SessionTokenReader

__all__ = [
    "Allow",
    "AuthGatewayMiddleware",
    "Decision",
    "Gateway",
    "PathClass",
    "Redirect",
    "RouteAllowList",
    "SessionClaims",
    "SessionInfo",
    "SessionState",
    "SessionTokenReader",
    "classify",
    "decide",
]
