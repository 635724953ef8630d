"""Session token reader: turns the request's session artifact into a SessionState."""

import enum
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from starlette.requests import HTTPConnection

from propdesk.core.config import GatewayConfig
from propdesk.core.errors import SessionVerificationError
from propdesk.core.logging import get_logger
from propdesk.core.security import decode_session_token

logger = get_logger(__name__)

KeyProvider = Callable[[], Awaitable[str]]


class SessionState(str, enum.Enum):
    """Authentication state derived from the session token on each request."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATED_INCOMPLETE = "AUTHENTICATED_INCOMPLETE"
    AUTHENTICATED_COMPLETE = "AUTHENTICATED_COMPLETE"

    @property
    def is_authenticated(self) -> bool:
        return self is not SessionState.UNAUTHENTICATED


def missing_profile_fields(payload: dict[str, Any], required: tuple[str, ...]) -> list[str]:
    """Return the required claim names that are absent or blank in a decoded token payload."""
    missing = []
    for name in required:
        value = payload.get(name)
        if not value or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


class SessionClaims(BaseModel):
    """
    Identity claims carried by a verified session token.

    Side claims are parsed leniently: numeric ids become strings and an
    unreadable isAdmin is false. Profile completeness is not decided here.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    sub: Optional[str] = None
    id: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    organization_id: Optional[str] = Field(None, alias="organizationId")
    organization_name: Optional[str] = Field(None, alias="organizationName")
    is_admin: bool = Field(False, alias="isAdmin")

    @field_validator(
        "sub", "id", "email", "first_name", "last_name", "organization_id", "organization_name",
        mode="before",
    )
    @classmethod
    def stringify_scalars(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("is_admin", mode="before")
    @classmethod
    def lenient_bool(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() in {"true", "1", "yes"}

    @property
    def user_id(self) -> Optional[str]:
        return self.id or self.sub

    def missing_profile_fields(self, required: tuple[str, ...]) -> list[str]:
        return missing_profile_fields(self.model_dump(by_alias=True), required)


@dataclass(frozen=True)
class SessionInfo:
    """What the reader knows about the caller: a state, the claims and any missing profile fields."""

    state: SessionState
    claims: Optional[SessionClaims] = None
    missing_fields: tuple[str, ...] = ()


ANONYMOUS = SessionInfo(state=SessionState.UNAUTHENTICATED)


def static_key_provider(secret: str) -> KeyProvider:
    """Key provider for a signing key known at startup."""

    async def provide() -> str:
        return secret

    return provide


class SessionTokenReader:
    """
    Reads and verifies the session token attached to a request.

    Absence, tampering, expiry and key-source failures all produce an
    unauthenticated session; nothing here raises for a bad token.
    """

    def __init__(self, config: GatewayConfig, key_provider: KeyProvider):
        self.config = config
        self.key_provider = key_provider

    def extract_token(self, conn: HTTPConnection) -> Optional[str]:
        """Find the raw token in the session cookie, else in an Authorization: Bearer header."""
        for name in self.config.session_cookie_names:
            token = conn.cookies.get(name)
            if token:
                return token

        authorization = conn.headers.get("authorization", "")
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
        return None

    async def _signing_key(self) -> str:
        try:
            return await self.key_provider()
        except Exception as exc:
            raise SessionVerificationError(
                "Signing key unavailable",
                details={"error": type(exc).__name__},
            ) from exc

    def _claims_state(self, payload: dict[str, Any]) -> SessionInfo:
        missing = tuple(missing_profile_fields(payload, self.config.required_profile_claims))
        state = (
            SessionState.AUTHENTICATED_INCOMPLETE if missing else SessionState.AUTHENTICATED_COMPLETE
        )

        try:
            claims = SessionClaims.model_validate(payload)
        except ValidationError as exc:
            # Identity is unusable but the state stands on the raw profile claims
            logger.info("gateway.malformed_claims", errors=exc.error_count())
            claims = None

        return SessionInfo(state=state, claims=claims, missing_fields=missing)

    async def read(self, conn: HTTPConnection) -> SessionInfo:
        """Verify the request's session token and derive its SessionInfo."""
        token = self.extract_token(conn)
        if not token:
            return ANONYMOUS

        try:
            secret = await self._signing_key()
        except SessionVerificationError as exc:
            # Fails open to "no session"; the event name keeps it distinguishable.
            logger.warning(
                "gateway.verification_failed",
                path=conn.url.path,
                code=exc.code,
                **exc.details,
            )
            return ANONYMOUS

        try:
            payload = decode_session_token(token, secret, self.config.jwt_algorithms)
        except jwt.InvalidTokenError as exc:
            logger.warning(
                "gateway.invalid_token",
                path=conn.url.path,
                reason=type(exc).__name__,
            )
            return ANONYMOUS

        return self._claims_state(payload)

    async def read_state(self, conn: HTTPConnection) -> SessionState:
        info = await self.read(conn)
        return info.state
