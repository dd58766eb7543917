from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from trip_planner.planner.optimizer import (  # noqa: E402
    TspLocation,
    build_distance_matrix,
    improve_route_two_opt,
    nearest_neighbor_tsp,
    route_distance,
)


def make_locations(num_locations: int, rng: np.random.Generator) -> list[TspLocation]:
    # Roughly a 50 km square around Seoul.
    lats = 37.3 + rng.random(num_locations) * 0.45
    lngs = 126.7 + rng.random(num_locations) * 0.55
    return [TspLocation(id=f"stop_{i}", lat=float(lat), lng=float(lng)) for i, (lat, lng) in enumerate(zip(lats, lngs))]


def run_benchmark(num_locations: int = 20, random_samples: int = 2000, seed: int = 42) -> dict:
    rng = np.random.default_rng(seed)
    locations = make_locations(num_locations, rng)
    matrix = build_distance_matrix(locations)

    started = time.perf_counter()
    initial = nearest_neighbor_tsp(matrix)
    nn_time = time.perf_counter() - started
    nn_distance = route_distance(initial, matrix)

    started = time.perf_counter()
    refined = improve_route_two_opt(initial, matrix)
    two_opt_time = time.perf_counter() - started
    two_opt_distance = route_distance(refined, matrix)

    random_distances = []
    for _ in range(random_samples):
        tail = rng.permutation(np.arange(1, num_locations)).tolist()
        random_distances.append(route_distance([0, *tail], matrix))

    avg_random = float(np.mean(random_distances))
    return {
        "num_locations": num_locations,
        "nn_time_s": nn_time,
        "nn_distance_km": nn_distance,
        "two_opt_time_s": two_opt_time,
        "two_opt_distance_km": two_opt_distance,
        "avg_random_distance_km": avg_random,
        "best_random_distance_km": float(np.min(random_distances)),
        "gain_vs_nn": (nn_distance - two_opt_distance) / nn_distance if nn_distance else 0.0,
        "gain_vs_random_avg": (avg_random - two_opt_distance) / avg_random if avg_random else 0.0,
    }


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Benchmark nearest-neighbour + 2-opt against random orders.")
    parser.add_argument("--sizes", nargs="+", type=int, default=[10, 20, 40], help="Numbers of stops to benchmark.")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for the synthetic stops.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("evaluation_results"),
        help="Directory for the report and the comparison plot.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)-8s | %(message)s")
    args.output_dir.mkdir(parents=True, exist_ok=True)

    results = []
    for size in args.sizes:
        logging.info("Benchmarking with %d stops...", size)
        results.append(run_benchmark(num_locations=size, seed=args.seed))

    sizes = [res["num_locations"] for res in results]
    plt.figure(figsize=(10, 6))
    plt.plot(sizes, [res["avg_random_distance_km"] for res in results], "r--", label="Random order (avg)")
    plt.plot(sizes, [res["nn_distance_km"] for res in results], "o-", label="Nearest neighbour")
    plt.plot(sizes, [res["two_opt_distance_km"] for res in results], "o-", label="Nearest neighbour + 2-opt")
    plt.title("Tour length by number of stops")
    plt.xlabel("Stops")
    plt.ylabel("Total distance (km)")
    plt.legend()
    plt.grid(True, linestyle=":", alpha=0.6)
    plot_path = args.output_dir / "tsp_benchmark.png"
    plt.savefig(plot_path)
    logging.info("Comparison plot saved to %s", plot_path)

    report_path = args.output_dir / "tsp_benchmark.txt"
    with open(report_path, "w") as f:
        f.write("NEAREST NEIGHBOUR + 2-OPT BENCHMARK RESULTS\n")
        f.write("===========================================\n\n")
        for res in results:
            f.write(f"Stops: {res['num_locations']}\n")
            f.write(f"  Nearest neighbour: {res['nn_distance_km']:.2f} km in {res['nn_time_s']:.4f} s\n")
            f.write(f"  2-opt refined: {res['two_opt_distance_km']:.2f} km in {res['two_opt_time_s']:.4f} s\n")
            f.write(f"  Random order avg: {res['avg_random_distance_km']:.2f} km\n")
            f.write(f"  Gain over nearest neighbour: {res['gain_vs_nn'] * 100:.2f}%\n")
            f.write(f"  Gain over random avg: {res['gain_vs_random_avg'] * 100:.2f}%\n")
            f.write("-" * 40 + "\n")
    logging.info("Benchmark complete. Results saved to %s", report_path)


if __name__ == "__main__":
    main()
