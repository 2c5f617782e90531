"""Command line entry point: python -m solver."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

from ephemeris.calculator import SwissEphemeris
from skyquery.config import get_settings

from solver.config import SolverConfig
from solver.errors import InvalidQueryError, OracleError
from solver.search import find_event
from solver.validation import parse_find_event_request

logger = logging.getLogger("solver")

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_INVALID = 2
EXIT_ORACLE_FAILURE = 3


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m solver",
        description="Find the nearest instant at which all sky constraints hold.",
    )
    parser.add_argument(
        "--request",
        type=Path,
        help="JSON file with {constraints, direction, startTime}; '-' reads stdin.",
    )
    parser.add_argument("--constraints", type=str, help="JSON list of constraints.")
    parser.add_argument("--direction", choices=("future", "past"), default="future")
    parser.add_argument("--start", type=str, help="Start instant (ISO-8601, default: now).")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log search phases.")
    return parser


def _load_payload(args: argparse.Namespace) -> object:
    if args.request is not None:
        raw = sys.stdin.read() if str(args.request) == "-" else args.request.read_text(encoding="utf-8")
        return json.loads(raw)
    if not args.constraints:
        raise InvalidQueryError("Either --request or --constraints is required")
    return {
        "constraints": json.loads(args.constraints),
        "direction": args.direction,
        "startTime": args.start or datetime.now(UTC).isoformat(),
    }


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    request = parse_find_event_request(_load_payload(args))
    oracle = SwissEphemeris(settings.swisseph_ephe_path)
    result = await find_event(
        oracle,
        request.constraints,
        request.direction,
        request.start_time,
        SolverConfig.from_settings(settings),
    )
    if not result.found:
        print("Event not found within search bounds", file=sys.stderr)
        return EXIT_NOT_FOUND
    print(result.timestamp)
    return EXIT_FOUND


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        return asyncio.run(_run(args))
    except (InvalidQueryError, json.JSONDecodeError, OSError) as exc:
        print(f"Invalid request: {exc}", file=sys.stderr)
        return EXIT_INVALID
    except OracleError as exc:
        logger.error("Search aborted: %s", exc)
        return EXIT_ORACLE_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
