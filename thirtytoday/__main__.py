"""Fetch the archive window and write it as JSON: python -m thirtytoday."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .config import Settings, get_settings
from .errors import UpstreamUnavailableError
from .http_client import build_http_client
from .services.aggregator import AggregatorService
from .store import write_document

logger = logging.getLogger("thirtytoday")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="thirtytoday",
        description="Fetch news, events and weather from 30 years ago today.",
    )
    parser.add_argument("guardian_key", help="Guardian content API key")
    parser.add_argument("nytimes_key", help="New York Times article search API key")
    parser.add_argument("meteostat_key", help="RapidAPI key for Meteostat")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the JSON document (default: DATA_PATH or data.json)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait between calls to the same upstream",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace, base: Settings | None = None) -> Settings:
    base = base or get_settings()
    update: dict[str, object] = {
        "guardian_api_key": args.guardian_key,
        "nytimes_api_key": args.nytimes_key,
        "meteostat_api_key": args.meteostat_key,
    }
    if args.output is not None:
        update["data_path"] = args.output
    if args.delay is not None:
        if args.delay < 0:
            raise SystemExit("--delay must not be negative")
        update["request_delay"] = args.delay
    return base.model_copy(update=update)


async def run(settings: Settings) -> Path:
    async with build_http_client(settings) as client:
        document = await AggregatorService(settings=settings, client=client).build()
    return write_document(document, settings.data_path)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    settings = build_settings(args)
    try:
        path = asyncio.run(run(settings))
    except UpstreamUnavailableError as exc:
        logger.error("Aborting: %s", exc)
        return 1
    except (OSError, ValidationError) as exc:
        logger.error("Could not write the archive document: %s", exc)
        return 1
    logger.info("Archive written to %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
