from __future__ import annotations

from .health import router as health_router
from .regions import router as regions_router
from .route import router as route_router

__all__ = ["health_router", "regions_router", "route_router"]
