"""Find the nearest instant at which a set of constraints all hold.

The search runs in three phases over integer milliseconds:

1. Coarse scan: step from the start instant by ``coarse_step`` in the search
   direction until the constraints hold or ``max_coarse_steps`` runs out.
2. Bisection: seed ``[hit - fine_window, hit + fine_window]`` and halve it,
   keeping the earliest (future) or latest (past) true midpoint.
3. Boundary scan: probe the candidate +/- 2 ``precision`` steps and keep the
   earliest (future) or latest (past) instant that still holds.

Known limitation: the bisection assumes the constraints flip at most once
inside the bracket. Fast bodies with tight orbs (e.g. Moon aspects) can
toggle more often, in which case the result is one of the true sub-intervals
rather than necessarily the nearest. Results are still reproducible: the same
inputs always probe the same instants.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from ephemeris.calculator import LongitudeOracle
from skyquery.schemas.constraints import Constraint, Direction

from solver.config import DEFAULT_CONFIG, SolverConfig
from solver.constraints import evaluate_all
from solver.errors import InvalidQueryError
from solver.instants import format_instant, from_ms, parse_instant, to_ms
from solver.validation import validate_constraints

logger = logging.getLogger(__name__)

BOUNDARY_SCAN_STEPS = 2


@dataclass(frozen=True)
class SearchResult:
    """Outcome of :func:`find_event`. ``instant`` is None when nothing was found."""

    instant: datetime | None
    coarse_hit: datetime | None = None
    evaluations: int = 0

    @property
    def found(self) -> bool:
        return self.instant is not None

    @property
    def timestamp(self) -> str | None:
        return format_instant(self.instant) if self.instant is not None else None


class _Probe:
    """Counts evaluations of one constraint set."""

    def __init__(self, oracle: LongitudeOracle, constraints: Sequence[Constraint]) -> None:
        self.oracle = oracle
        self.constraints = constraints
        self.calls = 0

    async def __call__(self, ms: int) -> bool:
        self.calls += 1
        return await evaluate_all(self.oracle, from_ms(ms), self.constraints)


def _parse_direction(direction: object) -> Direction:
    try:
        return Direction(direction)
    except ValueError:
        raise InvalidQueryError(f"Invalid direction: {direction!r}") from None


async def find_event(
    oracle: LongitudeOracle,
    constraints: Sequence[Constraint],
    direction: Direction | str,
    start: datetime | str,
    config: SolverConfig | None = None,
) -> SearchResult:
    """Search from ``start`` for the nearest instant where all constraints hold.

    Returns a :class:`SearchResult`; "not found" is an empty result, not an
    error. An empty constraint set always holds. Raises
    :class:`InvalidQueryError` for a bad start instant, direction, or
    constraint before any ephemeris lookup, and lets
    :class:`~ephemeris.calculator.OracleError` propagate unchanged.
    """
    config = config or DEFAULT_CONFIG
    direction = _parse_direction(direction)
    start_dt = parse_instant(start)
    probe = _Probe(oracle, validate_constraints(constraints))
    sign = 1 if direction is Direction.FUTURE else -1
    start_ms = to_ms(start_dt)

    logger.debug(
        "Searching %s from %s over %d constraint(s)",
        direction.value,
        format_instant(start_dt),
        len(probe.constraints),
    )

    coarse_ms = await _coarse_scan(probe, start_ms, sign, config)
    if coarse_ms is None:
        logger.info(
            "No event within %d coarse steps %s of %s",
            config.max_coarse_steps,
            direction.value,
            format_instant(start_dt),
        )
        return SearchResult(instant=None, evaluations=probe.calls)

    coarse_hit = from_ms(coarse_ms)
    logger.debug("Coarse hit at %s", format_instant(coarse_hit))

    candidate_ms = await _bisect(probe, coarse_ms, direction, config)
    if candidate_ms is None:
        logger.warning(
            "Coarse hit at %s did not survive bisection; reporting not found",
            format_instant(coarse_hit),
        )
        return SearchResult(instant=None, coarse_hit=coarse_hit, evaluations=probe.calls)

    boundary_ms = await _boundary_scan(probe, candidate_ms, direction, config)
    if boundary_ms is None:
        logger.warning("Boundary scan around %s found no match", format_instant(from_ms(candidate_ms)))
        return SearchResult(instant=None, coarse_hit=coarse_hit, evaluations=probe.calls)

    # A start that already satisfies the constraints is the nearest instant on
    # its own side; never report one behind it.
    if coarse_ms == start_ms and (boundary_ms - start_ms) * sign < 0:
        boundary_ms = start_ms

    instant = from_ms(boundary_ms)
    logger.info(
        "Found event %s from %s at %s after %d evaluations",
        direction.value,
        format_instant(start_dt),
        format_instant(instant),
        probe.calls,
    )
    return SearchResult(instant=instant, coarse_hit=coarse_hit, evaluations=probe.calls)


async def _coarse_scan(probe: _Probe, start_ms: int, sign: int, config: SolverConfig) -> int | None:
    step = sign * config.coarse_step_ms
    current = start_ms
    for _ in range(config.max_coarse_steps):
        if await probe(current):
            return current
        current += step
    return None


async def _bisect(probe: _Probe, coarse_ms: int, direction: Direction, config: SolverConfig) -> int | None:
    low = coarse_ms - config.fine_window_ms
    high = coarse_ms + config.fine_window_ms
    found: int | None = None
    iterations = 0

    while high - low > config.precision_ms and iterations < config.max_bisection_steps:
        mid = (low + high) // 2
        if await probe(mid):
            found = mid
            if direction is Direction.FUTURE:
                high = mid  # look for an earlier true instant
            else:
                low = mid  # look for a later true instant
        elif direction is Direction.FUTURE:
            low = mid
        else:
            high = mid
        iterations += 1

    logger.debug("Bisection finished after %d steps, bracket %d ms", iterations, high - low)
    return found


async def _boundary_scan(probe: _Probe, candidate_ms: int, direction: Direction, config: SolverConfig) -> int | None:
    best: int | None = None
    for k in range(-BOUNDARY_SCAN_STEPS, BOUNDARY_SCAN_STEPS + 1):
        t = candidate_ms + k * config.precision_ms
        if not await probe(t):
            continue
        if best is None:
            best = t
        elif direction is Direction.FUTURE:
            best = min(best, t)
        else:
            best = max(best, t)
    return best
