"""Shared helpers for HTML routes."""

from pathlib import Path
from typing import Optional

from fastapi.templating import Jinja2Templates

from propdesk.gateway.session import SessionClaims

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def display_name(claims: Optional[SessionClaims]) -> str:
    """Full name when both names are known, else email, else empty."""
    if claims is None:
        return ""
    if claims.first_name and claims.last_name:
        return f"{claims.first_name} {claims.last_name}"
    return claims.email or ""


templates.env.filters["display_name"] = display_name
