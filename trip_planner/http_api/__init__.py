from __future__ import annotations

from .server import create_fastapi_app
from .schemas import (
    ClusterRequest,
    ClusterResponse,
    OptimizeRouteRequest,
    OptimizeRouteResponse,
    PointInput,
)

__all__ = [
    "create_fastapi_app",
    "ClusterRequest",
    "ClusterResponse",
    "OptimizeRouteRequest",
    "OptimizeRouteResponse",
    "PointInput",
]
