from __future__ import annotations

from .config import RoutingConfig
from .estimators import ProviderError, RawEstimate, estimate_fallback
from .models import OptimizeRouteInput, OptimizeRouteResult, RoutePoint, SegmentEstimate
from .service import RoutePlanningService, RouteValidationError, derive_source

__all__ = [
    "OptimizeRouteInput",
    "OptimizeRouteResult",
    "ProviderError",
    "RawEstimate",
    "RoutePlanningService",
    "RoutePoint",
    "RouteValidationError",
    "RoutingConfig",
    "SegmentEstimate",
    "derive_source",
    "estimate_fallback",
]
