"""Per-segment travel estimates from mapping providers with a local fallback."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

import requests

from ..planner.geo import Coordinate, haversine_distance_km, round_to
from .config import RoutingConfig
from .models import Provider, RoutePoint

KAKAO_DIRECTIONS_URL = "https://apis-navi.kakaomobility.com/v1/directions"
ODSAY_TRANSIT_URL = "https://api.odsay.com/v1/api/searchPubTransPathT"


class ProviderError(RuntimeError):
    """A mapping provider could not produce an estimate."""


@dataclass(frozen=True)
class RawEstimate:
    distance_km: float
    duration_min: float
    provider: Provider


def straight_line_km(origin: RoutePoint, target: RoutePoint) -> float:
    return haversine_distance_km(Coordinate(origin.lat, origin.lng), Coordinate(target.lat, target.lng))


def estimate_fallback(origin: RoutePoint, target: RoutePoint, mode: str, config: RoutingConfig) -> RawEstimate:
    adjusted_km = straight_line_km(origin, target) * config.detour_factor
    duration_min = adjusted_km / config.fallback_speed_kmh(mode) * 60.0
    return RawEstimate(
        distance_km=round_to(adjusted_km, 2),
        duration_min=round_to(duration_min, 1),
        provider="fallback",
    )


def estimate_with_kakao(
    session: requests.Session,
    origin: RoutePoint,
    target: RoutePoint,
    api_key: str,
    *,
    timeout: float,
) -> RawEstimate:
    params = {
        "origin": f"{origin.lng},{origin.lat}",
        "destination": f"{target.lng},{target.lat}",
        "priority": "RECOMMEND",
        "alternatives": "false",
        "road_details": "false",
    }
    payload = _get_json(
        session,
        KAKAO_DIRECTIONS_URL,
        params=params,
        headers={"Authorization": f"KakaoAK {api_key}"},
        timeout=timeout,
    )

    summary = _dig(payload, "routes", 0, "summary")
    distance_m = _to_finite_number(_dig(summary, "distance"))
    duration_s = _to_finite_number(_dig(summary, "duration"))
    if distance_m is None or duration_s is None:
        raise ProviderError("Kakao response missing distance/duration")

    return RawEstimate(
        distance_km=round_to(distance_m / 1000.0, 2),
        duration_min=round_to(duration_s / 60.0, 1),
        provider="kakao",
    )


def estimate_with_odsay(
    session: requests.Session,
    origin: RoutePoint,
    target: RoutePoint,
    api_key: str,
    *,
    timeout: float,
) -> RawEstimate:
    params = {
        "SX": str(origin.lng),
        "SY": str(origin.lat),
        "EX": str(target.lng),
        "EY": str(target.lat),
        "apiKey": api_key,
    }
    payload = _get_json(session, ODSAY_TRANSIT_URL, params=params, timeout=timeout)

    info = _dig(payload, "result", "path", 0, "info")
    distance_m = _to_finite_number(_dig(info, "totalDistance"))
    duration_min = _to_finite_number(_dig(info, "totalTime"))
    if distance_m is None or duration_min is None:
        raise ProviderError("ODSAY response missing distance/time")

    return RawEstimate(
        distance_km=round_to(distance_m / 1000.0, 2),
        duration_min=round_to(duration_min, 1),
        provider="odsay",
    )


def _get_json(session: requests.Session, url: str, *, timeout: float, **kwargs: Any) -> Any:
    try:
        response = session.get(url, timeout=timeout, **kwargs)
    except requests.Timeout as exc:
        raise ProviderError("timed out") from exc
    except requests.RequestException as exc:
        raise ProviderError(str(exc) or exc.__class__.__name__) from exc

    if not response.ok:
        raise ProviderError(f"HTTP {response.status_code}")
    try:
        return response.json()
    except ValueError as exc:
        raise ProviderError("invalid JSON body") from exc


def _dig(payload: Any, *path: Any) -> Any:
    current = payload
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or len(current) <= key:
                return None
        elif not isinstance(current, dict):
            return None
        current = current[key] if isinstance(key, int) else current.get(key)
    return current


def _to_finite_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None
