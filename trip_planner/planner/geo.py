from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


def is_valid_coordinate(coordinate: Coordinate) -> bool:
    lat, lng = coordinate.lat, coordinate.lng
    if isinstance(lat, bool) or isinstance(lng, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False
    return math.isfinite(lat) and math.isfinite(lng) and abs(lat) <= 90 and abs(lng) <= 180


def haversine_distance_km(origin: Coordinate, target: Coordinate) -> float:
    """Great-circle distance in kilometres.

    Validity is the caller's concern: non-finite input yields ``nan`` rather
    than an exception.
    """
    lat_a, lon_a = np.radians((origin.lat, origin.lng))
    lat_b, lon_b = np.radians((target.lat, target.lng))

    delta_lat = lat_b - lat_a
    delta_lon = lon_b - lon_a

    with np.errstate(invalid="ignore"):
        a = np.sin(delta_lat / 2.0) ** 2 + np.cos(lat_a) * np.cos(lat_b) * np.sin(delta_lon / 2.0) ** 2
        a = np.clip(a, 0.0, 1.0)
        c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))
    return float(EARTH_RADIUS_KM * c)


def haversine(from_lat: float, from_lng: float, to_lat: float, to_lng: float) -> float:
    """Positional variant of :func:`haversine_distance_km`."""
    return haversine_distance_km(Coordinate(from_lat, from_lng), Coordinate(to_lat, to_lng))


def round_to(value: float, decimals: int) -> float:
    """Round half away from zero for positive values, like ``Math.round``."""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor
