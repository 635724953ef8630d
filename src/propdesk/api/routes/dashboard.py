"""Dashboard and the signed-in area pages (HTML)."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from propdesk.api.auth import get_session, require_session
from propdesk.api.utils import templates
from propdesk.gateway.session import SessionInfo

router = APIRouter(tags=["dashboard"])

# Pages served outside the gateway's allow-list; they guard themselves with require_session.
SIGNED_IN_PAGES = {
    "/clients": "Clientes",
    "/my-properties": "Mis propiedades",
    "/my-account": "Mi cuenta",
    "/my-business": "Mi negocio",
}


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request, session: SessionInfo = Depends(get_session)):
    return templates.TemplateResponse(request, "dashboard.html", {"claims": session.claims})


def _page_endpoint(heading: str):
    async def page(request: Request, session: SessionInfo = Depends(require_session)):
        return templates.TemplateResponse(
            request, "page.html", {"heading": heading, "claims": session.claims}
        )

    return page


for _path, _heading in SIGNED_IN_PAGES.items():
    router.add_api_route(
        _path,
        _page_endpoint(_heading),
        methods=["GET"],
        response_class=HTMLResponse,
        name=_path.strip("/").replace("-", "_"),
    )
