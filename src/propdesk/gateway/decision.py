"""
Decision engine for the authorization gateway.

Given the caller's session state and the requested page, decide whether the
request proceeds or is redirected. Rules are evaluated top to bottom and the
first match wins:

1. Incomplete profile, any path but the profile-completion page -> completion page
2. Incomplete profile on the profile-completion page -> allow
3. Root, authenticated -> home (dashboard)
4. Root, unauthenticated -> sign-in
5. Auth-only page (the completion page counts as one here):
   authenticated -> root, otherwise allow
6. Protected page, unauthenticated -> sign-in with callbackUrl
7. Anything else -> allow

Rules 1-2 deliberately take precedence over the root and auth-page rules.
"""

from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote

from propdesk.core.config import GatewayConfig
from propdesk.gateway.paths import PathClass
from propdesk.gateway.session import SessionState

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~"
_CALLBACK_SAFE_CHARS = "!*'()"


def encode_callback(value: str) -> str:
    """Percent-encode a path+query for use as a query parameter value."""
    return quote(value, safe=_CALLBACK_SAFE_CHARS)


@dataclass(frozen=True)
class Allow:
    """Let the request through untouched."""


@dataclass(frozen=True)
class Redirect:
    """Send the caller elsewhere, optionally remembering where they were going."""

    target: str
    callback_url: Optional[str] = None
    callback_param: str = "callbackUrl"

    @property
    def location(self) -> str:
        if self.callback_url is None:
            return self.target
        return f"{self.target}?{self.callback_param}={encode_callback(self.callback_url)}"


Decision = Union[Allow, Redirect]

ALLOW = Allow()


def original_destination(path: str, query: str = "") -> str:
    """Path plus query string, as the caller requested it."""
    if query:
        return f"{path}?{query}"
    return path


def decide(
    state: SessionState,
    path_class: PathClass,
    path: str,
    config: GatewayConfig,
    query: str = "",
) -> Decision:
    """Pure decision function; total over every state/path-class combination."""
    if state is SessionState.AUTHENTICATED_INCOMPLETE:
        if path != config.profile_completion_path:
            return Redirect(config.profile_completion_path)
        return ALLOW

    authenticated = state is SessionState.AUTHENTICATED_COMPLETE

    if path_class is PathClass.ROOT:
        if authenticated:
            return Redirect(config.home_path)
        return Redirect(config.sign_in_path)

    if path_class in (PathClass.AUTH_ONLY, PathClass.PROFILE_COMPLETION):
        if authenticated:
            return Redirect(config.root_path)
        return ALLOW

    if not authenticated:
        return Redirect(
            config.sign_in_path,
            callback_url=original_destination(path, query),
            callback_param=config.callback_param,
        )

    return ALLOW
