from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import pandas as pd

from trip_planner.planner import ClusteringError, Coordinate, RegionPoint, cluster_regions


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Group points of interest from a CSV file into regions.")
    parser.add_argument("points", type=Path, help="CSV file with columns id, lat, lng and an optional weight.")
    parser.add_argument("--radius", type=float, default=5.0, help="Maximum cluster radius in kilometres.")
    parser.add_argument("--min-size", type=int, default=1, help="Minimum number of points a region must hold.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_points(path: Path) -> list[RegionPoint]:
    if not path.exists():
        raise FileNotFoundError(f"Missing points dataset at '{path}'.")

    frame = pd.read_csv(path, dtype={"id": str})
    missing = {"id", "lat", "lng"} - set(frame.columns)
    if missing:
        raise ValueError(f"Points CSV is missing columns: {', '.join(sorted(missing))}")

    if "weight" not in frame.columns:
        frame["weight"] = 1.0
    frame["weight"] = pd.to_numeric(frame["weight"], errors="coerce").fillna(1.0)
    frame["id"] = frame["id"].fillna("").astype(str).str.strip()

    return [
        RegionPoint(id=row.id, coordinate=Coordinate(float(row.lat), float(row.lng)), weight=float(row.weight))
        for row in frame.itertuples(index=False)
    ]


def main() -> None:
    args = parse_args()
    setup_logging(args.verbose)
    logger = logging.getLogger("cluster_regions")

    logger.info("Loading points from %s", args.points)
    points = load_points(args.points)

    try:
        result = cluster_regions(points, max_cluster_radius_km=args.radius, min_cluster_size=args.min_size)
    except ClusteringError as exc:
        logger.error("Clustering rejected the input: %s", exc)
        raise SystemExit(1) from exc

    logger.info("Built %d regions from %d points", len(result.clusters), len(points))
    if result.dropped_point_ids:
        logger.warning("%d points fell into regions smaller than %d", len(result.dropped_point_ids), args.min_size)

    output = {
        "clusters": [
            {
                "id": cluster.id,
                "centroid": {"lat": cluster.centroid.lat, "lng": cluster.centroid.lng},
                "pointIds": list(cluster.point_ids),
                "totalWeight": cluster.total_weight,
            }
            for cluster in result.clusters
        ],
        "droppedPointIds": list(result.dropped_point_ids),
    }
    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
