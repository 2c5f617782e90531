"""Evaluate constraints against the sky at a single instant."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime

from ephemeris.aspects import angular_distance, aspect_error
from ephemeris.bodies import aspect_angle, longitude_to_sign
from ephemeris.calculator import LongitudeOracle, OracleError
from skyquery.schemas.constraints import (
    AspectConstraint,
    AtDegreeConstraint,
    Constraint,
    InSignConstraint,
)

logger = logging.getLogger(__name__)


async def evaluate(oracle: LongitudeOracle, instant: datetime, constraint: Constraint) -> bool:
    """Check whether a single constraint holds at ``instant``.

    Oracle failures propagate with the constraint attached to the error.
    """
    try:
        if isinstance(constraint, AspectConstraint):
            return await _check_aspect(oracle, instant, constraint)
        if isinstance(constraint, InSignConstraint):
            return await _check_in_sign(oracle, instant, constraint)
        if isinstance(constraint, AtDegreeConstraint):
            return await _check_at_degree(oracle, instant, constraint)
    except OracleError as exc:
        if exc.constraint is None:
            exc.constraint = constraint
        raise

    logger.warning("Unknown constraint kind: %r", getattr(constraint, "kind", type(constraint).__name__))
    return False


async def evaluate_all(
    oracle: LongitudeOracle,
    instant: datetime,
    constraints: Sequence[Constraint],
) -> bool:
    """Check that every constraint holds; stops at the first one that doesn't."""
    for constraint in constraints:
        if not await evaluate(oracle, instant, constraint):
            return False
    return True


async def _check_aspect(oracle: LongitudeOracle, instant: datetime, constraint: AspectConstraint) -> bool:
    lon_a, lon_b = await asyncio.gather(
        oracle.longitude(constraint.planet_a, instant),
        oracle.longitude(constraint.planet_b, instant),
    )
    separation = angular_distance(lon_a, lon_b)
    return aspect_error(separation, aspect_angle(constraint.aspect)) <= constraint.orb


async def _check_in_sign(oracle: LongitudeOracle, instant: datetime, constraint: InSignConstraint) -> bool:
    longitude = await oracle.longitude(constraint.planet, instant)
    sign, _ = longitude_to_sign(longitude)
    return sign == constraint.sign


async def _check_at_degree(oracle: LongitudeOracle, instant: datetime, constraint: AtDegreeConstraint) -> bool:
    longitude = await oracle.longitude(constraint.planet, instant)
    diff = abs(longitude - constraint.degree)
    # 359 and 0 are one degree apart
    return min(diff, abs(diff - 360.0)) <= constraint.orb
