from __future__ import annotations

import argparse
import logging

import uvicorn

from trip_planner.http_api import create_fastapi_app


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the FastAPI server for route optimisation and region clustering.")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Host interface to bind.")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")
    parser.add_argument(
        "--origins",
        nargs="*",
        default=None,
        help="Optional list of allowed CORS origins (defaults include localhost:3000).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level for the service.",
    )
    return parser.parse_args()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main() -> None:
    args = parse_args()
    configure_logging(args.log_level)
    app = create_fastapi_app(allowed_origins=args.origins)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


app = create_fastapi_app()


if __name__ == "__main__":
    main()
