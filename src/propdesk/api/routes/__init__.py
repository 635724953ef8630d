"""Route modules package."""

from propdesk.api.routes.auth_pages import router as auth_pages_router
from propdesk.api.routes.dashboard import router as dashboard_router

__all__ = ["auth_pages_router", "dashboard_router"]
