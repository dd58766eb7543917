from __future__ import annotations

from fastapi import APIRouter, HTTPException

from ..schemas import ClusterRequest, ClusterResponse
from ...planner.clustering import ClusteringError, RegionPoint, cluster_regions
from ...planner.geo import Coordinate

router = APIRouter(tags=["Regions"])


@router.post("/regions/cluster", response_model=ClusterResponse)
def cluster(payload: ClusterRequest) -> ClusterResponse:
    points = [
        RegionPoint(id=point.id, coordinate=Coordinate(point.lat, point.lng), weight=point.weight)
        for point in payload.points
    ]
    try:
        result = cluster_regions(
            points,
            max_cluster_radius_km=payload.max_cluster_radius_km,
            min_cluster_size=payload.min_cluster_size,
        )
    except ClusteringError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ClusterResponse.from_result(result)
