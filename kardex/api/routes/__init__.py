"""API routes."""

from kardex.api.routes.health import router as health_router
from kardex.api.routes.items import router as items_router
from kardex.api.routes.kardex import router as kardex_router

__all__ = ["health_router", "items_router", "kardex_router"]
