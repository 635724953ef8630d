"""Path classification and the route allow-list pre-filter."""

import enum
from dataclasses import dataclass

from propdesk.core.config import GatewayConfig


class PathClass(str, enum.Enum):
    """What kind of page a request path points at."""

    ROOT = "ROOT"
    AUTH_ONLY = "AUTH_ONLY"
    PROFILE_COMPLETION = "PROFILE_COMPLETION"
    PROTECTED = "PROTECTED"


@dataclass(frozen=True)
class RouteAllowList:
    """
    Set of path patterns for which the gateway runs at all.

    Patterns are literal paths (exact match) or end in "/*", which matches
    the base path and everything below it: "/reset-password/*" matches
    "/reset-password" and "/reset-password/<token>".
    """

    exact: frozenset[str]
    subtrees: tuple[str, ...]

    @classmethod
    def from_patterns(cls, patterns: tuple[str, ...] | list[str]) -> "RouteAllowList":
        exact = set()
        subtrees = []
        for pattern in patterns:
            if pattern.endswith("/*"):
                subtrees.append(pattern[:-2] or "/")
            else:
                exact.add(pattern)
        return cls(exact=frozenset(exact), subtrees=tuple(subtrees))

    def matches(self, path: str) -> bool:
        if path in self.exact:
            return True
        for base in self.subtrees:
            if path == base or path.startswith(base.rstrip("/") + "/"):
                return True
        return False


def classify(path: str, config: GatewayConfig) -> PathClass:
    """Map a request path to exactly one PathClass."""
    if path == config.root_path:
        return PathClass.ROOT
    if path == config.profile_completion_path:
        return PathClass.PROFILE_COMPLETION
    if path.startswith(config.auth_only_prefixes):
        return PathClass.AUTH_ONLY
    return PathClass.PROTECTED
