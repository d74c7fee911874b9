"""
Run the PageSpeed Insights exporter from CLI.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from psi_exporter.config import ConfigurationError, load_exporter_settings
from psi_exporter.logging_utils import configure_logging
from psi_exporter.main import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export PageSpeed Insights results as Prometheus gauges.")
    parser.add_argument("--apikey", dest="api_key", default=None, help="Google PageSpeed Insights API key.")
    parser.add_argument("--urls", dest="urls", default=None, help="Comma-separated list of URLs to monitor.")
    parser.add_argument(
        "--minutes",
        dest="minutes",
        default=None,
        help="Comma-separated list of minutes in an hour to run fetch (default 0,30).",
    )
    parser.add_argument("--port", dest="port", type=int, default=None, help="Port to run the exporter on.")
    parser.add_argument("--host", dest="host", default=None, help="Address to bind (default 0.0.0.0).")
    parser.add_argument(
        "--initial",
        dest="initial",
        action="store_true",
        default=None,
        help="Run one full sweep at startup.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        settings = load_exporter_settings(
            api_key=args.api_key,
            urls=args.urls,
            minutes=args.minutes,
            port=args.port,
            host=args.host,
            run_on_start=args.initial,
        )
    except ConfigurationError as exc:
        logger.critical("%s", exc)
        return 1

    application = create_app(settings)
    logger.info("PSI Exporter listening on %s:%d", settings.host, settings.port)
    uvicorn.run(application, host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
