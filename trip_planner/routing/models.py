from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

TransportMode = Literal["driving", "transit", "walking"]
Provider = Literal["kakao", "odsay", "fallback"]


@dataclass(frozen=True)
class RoutePoint:
    lat: float
    lng: float
    id: Optional[str] = None
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name, "lat": self.lat, "lng": self.lng}


@dataclass
class OptimizeRouteInput:
    start: RoutePoint
    waypoints: List[RoutePoint] = field(default_factory=list)
    end: Optional[RoutePoint] = None
    round_trip: bool = False
    mode: TransportMode = "driving"


@dataclass(frozen=True)
class SegmentEstimate:
    from_point: RoutePoint
    to_point: RoutePoint
    distance_km: float
    duration_min: float
    provider: Provider

    def to_dict(self) -> Dict[str, object]:
        return {
            "from": self.from_point.to_dict(),
            "to": self.to_point.to_dict(),
            "distanceKm": self.distance_km,
            "durationMin": self.duration_min,
            "provider": self.provider,
        }


@dataclass
class OptimizeRouteResult:
    ordered_points: List[RoutePoint]
    segments: List[SegmentEstimate]
    total_distance_km: float
    total_duration_min: float
    source: str
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "orderedPoints": [point.to_dict() for point in self.ordered_points],
            "segments": [segment.to_dict() for segment in self.segments],
            "totalDistanceKm": self.total_distance_km,
            "totalDurationMin": self.total_duration_min,
            "source": self.source,
            "warnings": list(self.warnings),
        }
