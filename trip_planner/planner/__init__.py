from __future__ import annotations

from .clustering import (
    ClusteringError,
    ClusteringResult,
    RegionCluster,
    RegionPoint,
    cluster_regions,
    cluster_regions_by_coordinates,
)
from .geo import EARTH_RADIUS_KM, Coordinate, haversine, haversine_distance_km, is_valid_coordinate, round_to
from .optimizer import (
    TspLocation,
    TspResult,
    build_distance_matrix,
    improve_route_two_opt,
    nearest_neighbor_tsp,
    optimize_order,
    route_distance,
)

__all__ = [
    "ClusteringError",
    "ClusteringResult",
    "Coordinate",
    "EARTH_RADIUS_KM",
    "RegionCluster",
    "RegionPoint",
    "TspLocation",
    "TspResult",
    "build_distance_matrix",
    "cluster_regions",
    "cluster_regions_by_coordinates",
    "haversine",
    "haversine_distance_km",
    "improve_route_two_opt",
    "is_valid_coordinate",
    "nearest_neighbor_tsp",
    "optimize_order",
    "round_to",
    "route_distance",
]
