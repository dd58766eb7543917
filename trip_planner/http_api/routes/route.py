from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import enforce_route_rate_limit, get_routing_service
from ..schemas import OptimizeRouteRequest, OptimizeRouteResponse
from ...routing.service import RoutePlanningService, RouteValidationError

router = APIRouter(tags=["Routes"])


@router.post(
    "/route/optimize",
    response_model=OptimizeRouteResponse,
    dependencies=[Depends(enforce_route_rate_limit)],
)
def optimize_route(
    payload: OptimizeRouteRequest,
    service: RoutePlanningService = Depends(get_routing_service),
) -> OptimizeRouteResponse:
    try:
        result = service.optimize_route(payload.to_input())
    except RouteValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return OptimizeRouteResponse(success=True, data=result.to_dict())
