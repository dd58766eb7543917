from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import Callable, ContextManager, List, Optional, Sequence, Tuple

import requests

from ..planner.optimizer import TspLocation, optimize_order
from .config import RoutingConfig
from .estimators import (
    ProviderError,
    RawEstimate,
    estimate_fallback,
    estimate_with_kakao,
    estimate_with_odsay,
    round_to,
)
from .models import OptimizeRouteInput, OptimizeRouteResult, RoutePoint, SegmentEstimate

logger = logging.getLogger(__name__)

_START_ID = "__start__"
MISSING_KEYS_WARNING = "No KAKAO/ODSAY API key found in environment. Using local fallback estimates."


class RouteValidationError(ValueError):
    """The request cannot be turned into a route (client error)."""


class RoutePlanningService:
    """Orders stops with the planner core and estimates each leg of the trip."""

    def __init__(
        self,
        config: Optional[RoutingConfig] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or RoutingConfig()
        # An injected session is shared across calls; otherwise each route opens its own.
        self.session = session

    def order_waypoints(self, start: RoutePoint, waypoints: Sequence[RoutePoint]) -> List[RoutePoint]:
        if not waypoints:
            return []

        # Positional ids: caller ids are optional and may repeat.
        locations = [
            TspLocation(id=str(index), lat=point.lat, lng=point.lng, name=point.name)
            for index, point in enumerate(waypoints)
        ]
        start_location = TspLocation(id=_START_ID, lat=start.lat, lng=start.lng, name=start.name)
        result = optimize_order(locations, start_location, max_passes=self.config.two_opt_max_passes)
        return [waypoints[int(node_id)] for node_id in result.ordered_ids if node_id != _START_ID]

    def optimize_route(self, request: OptimizeRouteInput) -> OptimizeRouteResult:
        warnings: List[str] = []
        if not self.config.has_provider_keys:
            warnings.append(MISSING_KEYS_WARNING)

        ordered_points = [request.start, *self.order_waypoints(request.start, request.waypoints)]
        if request.end is not None:
            ordered_points.append(request.end)
        elif request.round_trip:
            ordered_points.append(request.start)

        if len(ordered_points) < 2:
            raise RouteValidationError("At least two points are required to optimize a route.")

        segments: List[SegmentEstimate] = []
        with self._open_session() as session:
            for origin, target in zip(ordered_points[:-1], ordered_points[1:]):
                estimate = self.estimate_segment(origin, target, request.mode, warnings, session=session)
                segments.append(
                    SegmentEstimate(
                        from_point=origin,
                        to_point=target,
                        distance_km=estimate.distance_km,
                        duration_min=estimate.duration_min,
                        provider=estimate.provider,
                    )
                )

        return OptimizeRouteResult(
            ordered_points=ordered_points,
            segments=segments,
            total_distance_km=round_to(sum(segment.distance_km for segment in segments), 2),
            total_duration_min=round_to(sum(segment.duration_min for segment in segments), 1),
            source=derive_source(segments),
            warnings=warnings,
        )

    def estimate_segment(
        self,
        origin: RoutePoint,
        target: RoutePoint,
        mode: str,
        warnings: List[str],
        *,
        session: Optional[requests.Session] = None,
    ) -> RawEstimate:
        if session is None:
            with self._open_session() as opened:
                return self.estimate_segment(origin, target, mode, warnings, session=opened)

        for provider, estimator in self._estimators(origin, target, mode, session):
            try:
                return estimator()
            except ProviderError as exc:
                message = (
                    f"{provider.upper()} estimate failed for "
                    f"{origin.name or 'point'} -> {target.name or 'point'} ({exc})."
                )
                logger.warning(message)
                warnings.append(message)

        logger.debug("Using straight-line estimate for %s -> %s", origin.name or "point", target.name or "point")
        return estimate_fallback(origin, target, mode, self.config)

    def _estimators(
        self,
        origin: RoutePoint,
        target: RoutePoint,
        mode: str,
        session: requests.Session,
    ) -> List[Tuple[str, Callable[[], RawEstimate]]]:
        config = self.config
        available = {}
        if config.kakao_api_key:
            available["kakao"] = lambda: estimate_with_kakao(
                session, origin, target, config.kakao_api_key, timeout=config.kakao_timeout_s
            )
        if config.odsay_api_key:
            available["odsay"] = lambda: estimate_with_odsay(
                session, origin, target, config.odsay_api_key, timeout=config.odsay_timeout_s
            )

        preference = ("odsay", "kakao") if mode == "transit" else ("kakao", "odsay")
        return [(name, available[name]) for name in preference if name in available]

    def _open_session(self) -> ContextManager[requests.Session]:
        if self.session is not None:
            return nullcontext(self.session)
        return requests.Session()


def derive_source(segments: Sequence[SegmentEstimate]) -> str:
    providers = {segment.provider for segment in segments}
    if len(providers) == 1:
        return segments[0].provider
    if not providers:
        return "fallback"
    return "mixed"
