import math

import numpy as np
import pytest

from trip_planner.planner.geo import (
    EARTH_RADIUS_KM,
    Coordinate,
    haversine,
    haversine_distance_km,
    is_valid_coordinate,
    round_to,
)


def _random_coordinates(count, seed=7):
    rng = np.random.default_rng(seed)
    lats = rng.uniform(-90, 90, count)
    lngs = rng.uniform(-180, 180, count)
    return [Coordinate(float(lat), float(lng)) for lat, lng in zip(lats, lngs)]


@pytest.mark.parametrize(
    "coordinate",
    [Coordinate(0.0, 0.0), Coordinate(37.5665, 126.978), Coordinate(-90.0, 180.0), Coordinate(89.9, -179.9)],
)
def test_distance_to_itself_is_zero(coordinate):
    assert haversine_distance_km(coordinate, coordinate) == 0


def test_distance_is_symmetric_and_non_negative():
    points = _random_coordinates(30)
    for a in points:
        for b in points:
            forward = haversine_distance_km(a, b)
            assert forward == haversine_distance_km(b, a)
            assert forward >= 0


def test_one_degree_of_longitude_on_the_equator():
    expected = EARTH_RADIUS_KM * math.pi / 180
    assert haversine_distance_km(Coordinate(0, 0), Coordinate(0, 1)) == pytest.approx(expected, rel=1e-9)


def test_seoul_to_busan_is_about_325_km():
    seoul = Coordinate(37.5665, 126.9780)
    busan = Coordinate(35.1796, 129.0756)
    assert haversine_distance_km(seoul, busan) == pytest.approx(325, abs=5)


def test_antipodal_points_stay_finite():
    distance = haversine_distance_km(Coordinate(0, 0), Coordinate(0, 180))
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM)


def test_positional_alias_matches():
    assert haversine(37.0, 127.0, 37.1, 127.2) == haversine_distance_km(Coordinate(37.0, 127.0), Coordinate(37.1, 127.2))


def test_non_finite_input_yields_nan_without_raising():
    assert math.isnan(haversine_distance_km(Coordinate(float("nan"), 0), Coordinate(0, 0)))
    assert math.isnan(haversine_distance_km(Coordinate(0, float("inf")), Coordinate(0, 0)))


@pytest.mark.parametrize(
    "coordinate, expected",
    [
        (Coordinate(0, 0), True),
        (Coordinate(90, 180), True),
        (Coordinate(-90, -180), True),
        (Coordinate(90.0001, 0), False),
        (Coordinate(0, -180.5), False),
        (Coordinate(float("nan"), 0), False),
        (Coordinate(0, float("inf")), False),
        (Coordinate(True, 0), False),
        (Coordinate("37.5", 127), False),
    ],
)
def test_is_valid_coordinate(coordinate, expected):
    assert is_valid_coordinate(coordinate) is expected


def test_round_to_rounds_halves_up():
    assert round_to(0.125, 2) == 0.13
    assert round_to(0.25, 1) == 0.3
    assert round_to(2.25, 1) == 2.3
    assert round_to(12.0, 1) == 12.0
