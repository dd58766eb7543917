from __future__ import annotations

from .planner import (
    ClusteringError,
    ClusteringResult,
    Coordinate,
    RegionCluster,
    RegionPoint,
    TspLocation,
    TspResult,
    cluster_regions,
    cluster_regions_by_coordinates,
    haversine_distance_km,
    is_valid_coordinate,
    optimize_order,
)
from .routing import RoutePlanningService, RoutingConfig

__all__ = [
    "ClusteringError",
    "ClusteringResult",
    "Coordinate",
    "RegionCluster",
    "RegionPoint",
    "RoutePlanningService",
    "RoutingConfig",
    "TspLocation",
    "TspResult",
    "cluster_regions",
    "cluster_regions_by_coordinates",
    "haversine_distance_km",
    "is_valid_coordinate",
    "optimize_order",
]
