"""Session token signing and verification (JWT, HMAC)."""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

DEFAULT_ALGORITHM = "HS256"


def create_session_token(
    claims: dict[str, Any],
    secret: str,
    max_age: int = 30 * 24 * 60 * 60,
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """
    Sign a session token carrying the given identity claims.

    Args:
        claims: Identity and profile claims (sub, email, firstName, ...)
        secret: Signing key
        max_age: Lifetime in seconds, written as the exp claim
        algorithm: JWT signing algorithm

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + timedelta(seconds=max_age),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_session_token(
    token: str,
    secret: str,
    algorithms: tuple[str, ...] | list[str] = (DEFAULT_ALGORITHM,),
) -> dict[str, Any]:
    """
    Verify signature and expiry of a session token and return its claims.

    Raises:
        jwt.InvalidTokenError: If the token is malformed, tampered with or expired
    """
    return jwt.decode(token, secret, algorithms=list(algorithms))
