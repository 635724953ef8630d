"""Application settings and the immutable gateway configuration."""

import os
from dataclasses import dataclass

from propdesk.core.errors import ConfigurationError

DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"

# Paths that reach the authorization gateway at all. "/*" suffix = base path plus sub-paths.
DEFAULT_ROUTE_ALLOW_LIST = (
    "/sign-in",
    "/register",
    "/",
    "/dashboard",
    "/reset-password/*",
    "/welcome",
)

DEFAULT_AUTH_ONLY_PREFIXES = ("/sign-in", "/register", "/reset-password", "/welcome")


@dataclass(frozen=True)
class GatewayConfig:
    """
    Process-wide routing rules for the authorization gateway.

    Built once at startup and handed to the middleware by reference.
    """

    route_allow_list: tuple[str, ...] = DEFAULT_ROUTE_ALLOW_LIST
    auth_only_prefixes: tuple[str, ...] = DEFAULT_AUTH_ONLY_PREFIXES
    profile_completion_path: str = "/welcome"
    sign_in_path: str = "/sign-in"
    home_path: str = "/dashboard"
    root_path: str = "/"
    callback_param: str = "callbackUrl"
    session_cookie_name: str = "propdesk.session-token"
    secure_cookies: bool = False
    jwt_algorithms: tuple[str, ...] = ("HS256",)
    required_profile_claims: tuple[str, ...] = ("firstName", "lastName", "organizationName")

    def __post_init__(self) -> None:
        for pattern in self.route_allow_list:
            if not pattern.startswith("/"):
                raise ConfigurationError(
                    f"Allow-list pattern must start with '/': {pattern}",
                    details={"pattern": pattern},
                )
        if not self.jwt_algorithms:
            raise ConfigurationError("At least one JWT algorithm is required")

    @property
    def session_cookie_names(self) -> tuple[str, ...]:
        """Cookie names the session token may arrive under (secure name first)."""
        if self.secure_cookies:
            return (f"__Secure-{self.session_cookie_name}", self.session_cookie_name)
        return (self.session_cookie_name,)


@dataclass(frozen=True)
class Settings:
    """Environment-driven settings, read once in create_app."""

    environment: str = "development"
    session_secret_key: str = DEFAULT_SECRET_KEY
    session_cookie_name: str = "propdesk.session-token"
    session_max_age: int = 30 * 24 * 60 * 60
    static_dir: str = "static"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        environment = os.getenv("ENVIRONMENT", "development")
        secret = os.getenv("SESSION_SECRET_KEY", DEFAULT_SECRET_KEY)

        if environment == "production" and (not secret or secret == DEFAULT_SECRET_KEY):
            raise ConfigurationError(
                "SESSION_SECRET_KEY must be set in production",
                details={"environment": environment},
            )

        max_age_raw = os.getenv("SESSION_MAX_AGE", str(30 * 24 * 60 * 60))
        try:
            max_age = int(max_age_raw)
        except ValueError as e:
            raise ConfigurationError(
                f"SESSION_MAX_AGE must be an integer: {max_age_raw}",
                details={"value": max_age_raw},
            ) from e

        return cls(
            environment=environment,
            session_secret_key=secret,
            session_cookie_name=os.getenv("SESSION_COOKIE_NAME", "propdesk.session-token"),
            session_max_age=max_age,
            static_dir=os.getenv("STATIC_DIR", "static"),
        )

    def gateway_config(self) -> GatewayConfig:
        """Derive the gateway configuration from these settings."""
        return GatewayConfig(
            session_cookie_name=self.session_cookie_name,
            secure_cookies=self.is_production,
        )
