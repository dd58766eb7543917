from __future__ import annotations

import os
from functools import lru_cache

from fastapi import Depends, Request

from ..routing.config import RoutingConfig
from ..routing.service import RoutePlanningService
from .rate_limit import FixedWindowRateLimiter


@lru_cache(maxsize=1)
def get_routing_service() -> RoutePlanningService:
    return RoutePlanningService(RoutingConfig.from_env())


@lru_cache(maxsize=1)
def get_rate_limiter() -> FixedWindowRateLimiter:
    limit_value = os.getenv("ROUTE_RATE_LIMIT_PER_MINUTE", "20")
    try:
        limit = int(limit_value)
    except ValueError:
        limit = 20
    return FixedWindowRateLimiter(max_requests=max(limit, 1), window_s=60.0)


def enforce_route_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    client_key = request.client.host if request.client else "unknown"
    limiter.hit(client_key)
