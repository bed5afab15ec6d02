"""FastAPI routes package."""

from usefulwork.routes.health import router as health_router
from usefulwork.routes.work import router as work_router

__all__ = ["health_router", "work_router"]
