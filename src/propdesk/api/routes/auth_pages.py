"""Sign-in, registration, password reset and profile completion pages (HTML)."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from propdesk.api.auth import get_session
from propdesk.api.utils import templates
from propdesk.gateway.session import SessionInfo

router = APIRouter(tags=["auth-pages"])


@router.get("/sign-in", response_class=HTMLResponse)
async def sign_in_page(request: Request):
    """Render sign-in form; callbackUrl is carried through to the identity service."""
    return templates.TemplateResponse(
        request,
        "sign_in.html",
        {"callback_url": request.query_params.get("callbackUrl")},
    )


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    return templates.TemplateResponse(request, "register.html", {})


@router.get("/reset-password", response_class=HTMLResponse)
async def reset_password_request_page(request: Request):
    return templates.TemplateResponse(request, "reset_password.html", {"reset_token": None})


@router.get("/reset-password/{reset_token}", response_class=HTMLResponse)
async def reset_password_page(request: Request, reset_token: str):
    return templates.TemplateResponse(
        request, "reset_password.html", {"reset_token": reset_token}
    )


@router.get("/welcome", response_class=HTMLResponse)
async def welcome_page(request: Request, session: SessionInfo = Depends(get_session)):
    """Profile completion step; lists the profile fields still missing."""
    return templates.TemplateResponse(
        request,
        "welcome.html",
        {"claims": session.claims, "missing_fields": session.missing_fields},
    )
