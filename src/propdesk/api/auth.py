"""Session dependencies and sign-out."""

from fastapi import APIRouter
from fastapi.responses import RedirectResponse
from starlette.requests import Request

from propdesk.core.errors import UnauthorizedError
from propdesk.core.logging import get_logger
from propdesk.gateway.session import SessionInfo

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


async def get_session(request: Request) -> SessionInfo:
    """
    Dependency returning the caller's session.

    Allow-listed pages get the session the gateway already verified; other
    pages read it on demand with the same reader.
    """
    session = getattr(request.state, "session", None)
    if isinstance(session, SessionInfo):
        return session

    gateway = request.app.state.gateway
    session = await gateway.reader.read(request)
    request.state.session = session
    return session


async def require_session(request: Request) -> SessionInfo:
    """Dependency for pages outside the gateway's allow-list that still need a signed-in user."""
    session = await get_session(request)
    if not session.state.is_authenticated:
        raise UnauthorizedError("Not authenticated")
    return session


@router.post("/sign-out")
async def sign_out(request: Request):
    """Clear the session cookie and send the user to sign-in."""
    config = request.app.state.gateway.config
    session = await get_session(request)
    if session.claims and session.claims.user_id:
        logger.info("auth.sign_out", user_id=session.claims.user_id)

    response = RedirectResponse(url=config.sign_in_path, status_code=302)
    for name in config.session_cookie_names:
        response.delete_cookie(name, path="/", secure=config.secure_cookies)
    return response


@router.get("/sign-out")
async def sign_out_get(request: Request):
    """Sign-out GET endpoint for browser compatibility."""
    return await sign_out(request)
