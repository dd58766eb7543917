from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from ..planner.clustering import DEFAULTS, ClusteringResult
from ..routing.models import OptimizeRouteInput, RoutePoint

MAX_WAYPOINTS = 25
MAX_LABEL_LENGTH = 120

_MODE_SYNONYMS = {
    "driving": "driving",
    "drive": "driving",
    "car": "driving",
    "auto": "driving",
    "transit": "transit",
    "public": "transit",
    "public-transit": "transit",
    "bus": "transit",
    "subway": "transit",
    "walking": "walking",
    "walk": "walking",
    "pedestrian": "walking",
}


class PointInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = Field(None, validation_alias=AliasChoices("name", "title"))
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False, validation_alias=AliasChoices("lat", "latitude", "y"))
    lng: float = Field(
        ...,
        ge=-180,
        le=180,
        allow_inf_nan=False,
        validation_alias=AliasChoices("lng", "lon", "longitude", "x"),
    )

    @field_validator("id", "name", mode="before")
    @classmethod
    def _optional_label(cls, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        trimmed = value.strip()
        return trimmed[:MAX_LABEL_LENGTH] or None

    def to_route_point(self) -> RoutePoint:
        return RoutePoint(lat=self.lat, lng=self.lng, id=self.id, name=self.name)


class OptimizeRouteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: Optional[PointInput] = Field(None, validation_alias=AliasChoices("start", "origin"))
    end: Optional[PointInput] = Field(None, validation_alias=AliasChoices("end", "destination"))
    waypoints: List[PointInput] = Field(
        default_factory=list,
        max_length=MAX_WAYPOINTS,
        validation_alias=AliasChoices("waypoints", "points", "stops"),
    )
    round_trip: bool = Field(False, validation_alias=AliasChoices("roundTrip", "round_trip"))
    mode: Literal["driving", "transit", "walking"] = Field(
        "driving",
        validation_alias=AliasChoices("mode", "transportMode"),
    )

    @field_validator("waypoints", mode="before")
    @classmethod
    def _default_waypoints(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value: Any) -> str:
        if value is None or value == "":
            return "driving"
        if not isinstance(value, str):
            raise ValueError("mode must be a string.")
        normalized = _MODE_SYNONYMS.get(value.strip().lower())
        if normalized is None:
            raise ValueError("mode must be one of driving, transit, or walking.")
        return normalized

    @field_validator("round_trip", mode="before")
    @classmethod
    def _parse_round_trip(cls, value: Any) -> bool:
        if value is None or value == "":
            return False
        if isinstance(value, bool):
            return value
        if value in ("true", "false"):
            return value == "true"
        raise ValueError("roundTrip must be a boolean.")

    @model_validator(mode="after")
    def _normalize_points(self) -> "OptimizeRouteRequest":
        if self.start is None and self.waypoints:
            self.start = self.waypoints.pop(0)
        if self.start is None:
            raise ValueError(
                "A start/origin point is required. Provide start/origin or include waypoints/points with at least one item."
            )

        total = 1 + len(self.waypoints) + (1 if self.end is not None or self.round_trip else 0)
        if total < 2:
            raise ValueError("At least two points are required to optimize a route.")
        return self

    def to_input(self) -> OptimizeRouteInput:
        return OptimizeRouteInput(
            start=self.start.to_route_point(),
            waypoints=[point.to_route_point() for point in self.waypoints],
            end=self.end.to_route_point() if self.end is not None else None,
            round_trip=self.round_trip,
            mode=self.mode,
        )


class OptimizeRouteResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]


class ClusterPointInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    lat: float = Field(..., validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(..., validation_alias=AliasChoices("lng", "lon", "longitude"))
    weight: float = 1.0


class ClusterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    points: List[ClusterPointInput]
    max_cluster_radius_km: float = Field(DEFAULTS.max_cluster_radius_km, alias="maxClusterRadiusKm")
    min_cluster_size: int = Field(DEFAULTS.min_cluster_size, alias="minClusterSize")


class CentroidOutput(BaseModel):
    lat: float
    lng: float


class ClusterItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    centroid: CentroidOutput
    point_ids: List[str] = Field(..., alias="pointIds")
    total_weight: float = Field(..., alias="totalWeight")


class ClusterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    clusters: List[ClusterItem]
    dropped_point_ids: List[str] = Field(default_factory=list, alias="droppedPointIds")

    @classmethod
    def from_result(cls, result: ClusteringResult) -> "ClusterResponse":
        return cls(
            clusters=[
                ClusterItem(
                    id=cluster.id,
                    centroid=CentroidOutput(lat=cluster.centroid.lat, lng=cluster.centroid.lng),
                    point_ids=list(cluster.point_ids),
                    total_weight=cluster.total_weight,
                )
                for cluster in result.clusters
            ],
            dropped_point_ids=list(result.dropped_point_ids),
        )
