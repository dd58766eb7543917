from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .geo import Coordinate, haversine_distance_km, is_valid_coordinate


class ClusteringError(ValueError):
    """Raised when clustering input or options are rejected."""


@dataclass(frozen=True)
class ClusteringDefaults:
    max_cluster_radius_km: float = 5.0
    min_cluster_size: int = 1


DEFAULTS = ClusteringDefaults()


@dataclass(frozen=True)
class RegionPoint:
    id: str
    coordinate: Coordinate
    weight: float = 1.0


@dataclass(frozen=True)
class RegionCluster:
    id: str
    centroid: Coordinate
    point_ids: Tuple[str, ...]
    total_weight: float


@dataclass(frozen=True)
class ClusteringResult:
    clusters: Tuple[RegionCluster, ...]
    dropped_point_ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class _Accumulator:
    id: str
    centroid: Coordinate
    point_ids: Tuple[str, ...]
    total_weight: float
    weighted_lat_sum: float
    weighted_lng_sum: float

    @classmethod
    def seed(cls, cluster_id: str, point: RegionPoint, weight: float) -> "_Accumulator":
        return cls(
            id=cluster_id,
            centroid=point.coordinate,
            point_ids=(point.id,),
            total_weight=weight,
            weighted_lat_sum=point.coordinate.lat * weight,
            weighted_lng_sum=point.coordinate.lng * weight,
        )

    def add(self, point: RegionPoint, weight: float) -> "_Accumulator":
        weighted_lat_sum = self.weighted_lat_sum + point.coordinate.lat * weight
        weighted_lng_sum = self.weighted_lng_sum + point.coordinate.lng * weight
        total_weight = self.total_weight + weight
        return replace(
            self,
            point_ids=self.point_ids + (point.id,),
            total_weight=total_weight,
            weighted_lat_sum=weighted_lat_sum,
            weighted_lng_sum=weighted_lng_sum,
            centroid=Coordinate(weighted_lat_sum / total_weight, weighted_lng_sum / total_weight),
        )

    def freeze(self) -> RegionCluster:
        return RegionCluster(
            id=self.id,
            centroid=self.centroid,
            point_ids=self.point_ids,
            total_weight=self.total_weight,
        )


def cluster_regions_by_coordinates(
    points: Iterable[RegionPoint],
    *,
    max_cluster_radius_km: float = DEFAULTS.max_cluster_radius_km,
    min_cluster_size: int = DEFAULTS.min_cluster_size,
) -> List[RegionCluster]:
    """Group points into proximity clusters in a single pass over ``points``.

    Clusters smaller than ``min_cluster_size`` are dropped without notice; use
    :func:`cluster_regions` to learn which point ids were discarded.
    """
    result = cluster_regions(
        points,
        max_cluster_radius_km=max_cluster_radius_km,
        min_cluster_size=min_cluster_size,
    )
    return list(result.clusters)


def cluster_regions(
    points: Iterable[RegionPoint],
    *,
    max_cluster_radius_km: float = DEFAULTS.max_cluster_radius_km,
    min_cluster_size: int = DEFAULTS.min_cluster_size,
) -> ClusteringResult:
    """Greedy streaming clustering with incremental weighted centroids.

    Each point joins the closest existing cluster whose *current* centroid
    lies within ``max_cluster_radius_km`` (ties go to the earliest cluster),
    otherwise it seeds a new one. Centroids move as members are added, so a
    member can end up farther than the radius from its final centroid.
    Input order matters and is preserved.
    """
    _validate_options(max_cluster_radius_km, min_cluster_size)

    positions: Dict[str, int] = {}
    accumulators: List[_Accumulator] = []

    for point in points:
        weight = _validate_point(point, positions)
        positions[point.id] = len(positions)

        best_index = _closest_cluster(accumulators, point.coordinate, max_cluster_radius_km)
        if best_index is None:
            accumulators.append(_Accumulator.seed(f"region-{len(accumulators) + 1}", point, weight))
            continue

        accumulators[best_index] = accumulators[best_index].add(point, weight)

    clusters: List[RegionCluster] = []
    dropped: List[str] = []
    for accumulator in accumulators:
        if len(accumulator.point_ids) >= min_cluster_size:
            clusters.append(accumulator.freeze())
        else:
            dropped.extend(accumulator.point_ids)

    dropped.sort(key=positions.__getitem__)
    return ClusteringResult(clusters=tuple(clusters), dropped_point_ids=tuple(dropped))


def _closest_cluster(
    accumulators: Sequence[_Accumulator],
    coordinate: Coordinate,
    max_cluster_radius_km: float,
) -> Optional[int]:
    best_index: Optional[int] = None
    best_distance = math.inf
    for index, candidate in enumerate(accumulators):
        distance = haversine_distance_km(coordinate, candidate.centroid)
        if distance > max_cluster_radius_km:
            continue
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def _validate_options(max_cluster_radius_km: float, min_cluster_size: int) -> None:
    if (
        isinstance(max_cluster_radius_km, bool)
        or not isinstance(max_cluster_radius_km, (int, float))
        or not math.isfinite(max_cluster_radius_km)
        or max_cluster_radius_km <= 0
    ):
        raise ClusteringError(
            f"max_cluster_radius_km must be a finite positive number, got {max_cluster_radius_km!r}."
        )
    if isinstance(min_cluster_size, bool) or not isinstance(min_cluster_size, int) or min_cluster_size <= 0:
        raise ClusteringError(f"min_cluster_size must be a positive integer, got {min_cluster_size!r}.")


def _validate_point(point: RegionPoint, seen_ids: Mapping[str, int]) -> float:
    if not isinstance(point.id, str) or not point.id:
        raise ClusteringError(f"Every point must have a non-empty id, got {point.id!r}.")
    if point.id in seen_ids:
        raise ClusteringError(f"Duplicate point id: {point.id}")
    if not isinstance(point.coordinate, Coordinate) or not is_valid_coordinate(point.coordinate):
        raise ClusteringError(f"Invalid coordinate for point id {point.id}")

    weight = 1.0 if point.weight is None else point.weight
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not math.isfinite(weight) or weight <= 0:
        raise ClusteringError(f"Point weight must be a finite positive number (point id {point.id}, got {weight!r}).")
    return float(weight)

