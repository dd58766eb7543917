from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

import networkx as nx
import numpy as np

from .geo import Coordinate, haversine_distance_km, round_to


@dataclass(frozen=True)
class TspLocation:
    id: str
    lat: float
    lng: float
    name: Optional[str] = None
    category: Optional[str] = None
    duration: Optional[float] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)


@dataclass
class TspResult:
    ordered_ids: List[str]
    total_distance_km: float


def build_graph(locations: Sequence[TspLocation]) -> nx.Graph:
    """Create a complete weighted graph keyed by position in ``locations``."""
    graph = nx.Graph()
    for index, location in enumerate(locations):
        graph.add_node(index, id=location.id, coords=(location.lat, location.lng))

    for source in range(len(locations)):
        for target in range(source + 1, len(locations)):
            distance = haversine_distance_km(locations[source].coordinate, locations[target].coordinate)
            graph.add_edge(source, target, distance=distance)

    return graph


def build_distance_matrix(locations: Sequence[TspLocation]) -> np.ndarray:
    if not locations:
        return np.zeros((0, 0))
    graph = build_graph(locations)
    # nonedge=0.0 keeps the diagonal at zero; every off-diagonal pair is an edge.
    return nx.to_numpy_array(graph, nodelist=list(range(len(locations))), weight="distance", nonedge=0.0)


def nearest_neighbor_tsp(matrix: np.ndarray, start_index: int = 0) -> List[int]:
    """Greedy tour: always step to the closest unvisited stop (ties to the lowest index)."""
    size = len(matrix)
    if size <= 1:
        return list(range(size))

    visited = {start_index}
    route = [start_index]
    current = start_index

    while len(visited) < size:
        next_index = -1
        best_distance = np.inf
        for candidate in range(size):
            if candidate in visited:
                continue
            distance = matrix[current][candidate]
            if distance < best_distance:
                best_distance = distance
                next_index = candidate

        if next_index == -1:
            # Only reachable when the remaining distances are NaN.
            next_index = next(candidate for candidate in range(size) if candidate not in visited)

        route.append(next_index)
        visited.add(next_index)
        current = next_index

    return route


def route_distance(route: Sequence[int], matrix: np.ndarray) -> float:
    """Length of the open path through ``route`` (no return leg)."""
    total = 0.0
    for current, nxt in zip(route[:-1], route[1:]):
        total += float(matrix[current][nxt])
    return total


def improve_route_two_opt(
    route: Sequence[int],
    matrix: np.ndarray,
    *,
    max_passes: Optional[int] = None,
    deadline_seconds: Optional[float] = None,
) -> List[int]:
    """Refine ``route`` with 2-opt segment reversals until no move helps.

    The first stop never moves. A move is adopted only when it makes the path
    strictly shorter, so the result is never longer than the input. Without
    ``max_passes`` or ``deadline_seconds`` the search runs to a local optimum.
    """
    _check_bounds(max_passes, deadline_seconds)
    if len(route) <= 3:
        return list(route)

    deadline = None if deadline_seconds is None else time.monotonic() + deadline_seconds
    best = list(route)
    best_distance = route_distance(best, matrix)
    passes = 0
    improved = True

    while improved:
        if max_passes is not None and passes >= max_passes:
            break
        if deadline is not None and time.monotonic() >= deadline:
            break
        improved = False
        passes += 1

        for i in range(1, len(best) - 1):
            for j in range(i + 1, len(best)):
                candidate = best[:i] + best[i : j + 1][::-1] + best[j + 1 :]
                candidate_distance = route_distance(candidate, matrix)
                if candidate_distance < best_distance:
                    best = candidate
                    best_distance = candidate_distance
                    improved = True

    return best


def optimize_order(
    locations: Sequence[TspLocation],
    start_location: Optional[TspLocation] = None,
    *,
    max_passes: Optional[int] = None,
    deadline_seconds: Optional[float] = None,
) -> TspResult:
    """Order ``locations`` into a short visiting sequence.

    Nearest-neighbour construction followed by 2-opt refinement. When
    ``start_location`` is given it is visited first. Coordinates are not
    validated here; callers pass already-checked input.
    """
    _check_bounds(max_passes, deadline_seconds)
    if not locations and start_location is None:
        return TspResult(ordered_ids=[], total_distance_km=0.0)

    stops = [start_location, *locations] if start_location is not None else list(locations)
    matrix = build_distance_matrix(stops)
    initial = nearest_neighbor_tsp(matrix, start_index=0)
    improved = improve_route_two_opt(
        initial,
        matrix,
        max_passes=max_passes,
        deadline_seconds=deadline_seconds,
    )

    return TspResult(
        ordered_ids=[stops[index].id for index in improved],
        total_distance_km=round_to(route_distance(improved, matrix), 1),
    )


def _check_bounds(max_passes: Optional[int], deadline_seconds: Optional[float]) -> None:
    if max_passes is not None and (isinstance(max_passes, bool) or not isinstance(max_passes, int) or max_passes <= 0):
        raise ValueError(f"max_passes must be a positive integer, got {max_passes!r}.")
    if deadline_seconds is not None and not deadline_seconds > 0:
        raise ValueError(f"deadline_seconds must be positive, got {deadline_seconds!r}.")
