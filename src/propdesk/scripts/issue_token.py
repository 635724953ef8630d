"""Issue a development session token, for exercising the gateway without the identity service."""

import sys
import uuid

from propdesk.core.config import Settings
from propdesk.core.logging import get_logger
from propdesk.core.security import create_session_token

logger = get_logger(__name__)


def prompt_for_email() -> str:
    """Prompt for email with validation."""
    while True:
        email = input("Email address: ").strip()

        if not email:
            print("❌ Email cannot be empty")
            continue

        if "@" not in email or "." not in email:
            print("❌ Enter a valid email address")
            continue

        return email


def prompt_optional(label: str) -> str | None:
    """Prompt for a profile field; blank leaves it unset (incomplete profile)."""
    value = input(f"{label} (blank to leave unset): ").strip()
    return value or None


def build_claims(
    email: str,
    first_name: str | None,
    last_name: str | None,
    organization_name: str | None,
) -> dict:
    """Claims in the shape the identity service issues them."""
    user_id = str(uuid.uuid4())
    claims = {
        "sub": user_id,
        "id": user_id,
        "email": email,
        "firstName": first_name,
        "lastName": last_name,
        "organizationName": organization_name,
        "organizationId": str(uuid.uuid4()),
        "isAdmin": True,
    }
    if first_name and last_name:
        claims["name"] = f"{first_name} {last_name}"
    return claims


def issue_token() -> None:
    """Interactive token issuance."""
    print("\n" + "=" * 50)
    print("PropDesk - Issue development session token")
    print("=" * 50 + "\n")

    settings = Settings.from_env()
    if settings.is_production:
        print("❌ Refusing to issue tokens in production\n")
        sys.exit(1)

    claims = build_claims(
        email=prompt_for_email(),
        first_name=prompt_optional("First name"),
        last_name=prompt_optional("Last name"),
        organization_name=prompt_optional("Organization name"),
    )
    token = create_session_token(claims, settings.session_secret_key, settings.session_max_age)

    logger.info("token.issued", user_id=claims["sub"], email=claims["email"])
    print(f"\n✅ Set cookie {settings.session_cookie_name}={token}\n")


def main() -> None:
    """Entry point."""
    try:
        issue_token()
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
