"""Longitude oracle backed by the Swiss Ephemeris."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

import swisseph as swe
from skyquery.schemas.ephemeris import Body

from ephemeris.aspects import normalize_degree
from ephemeris.bodies import BODY_IDS, REFLECTED_BODIES

logger = logging.getLogger(__name__)

# Tropical, geocentric, true positions (no light-time correction)
CALC_FLAGS = swe.FLG_SWIEPH | swe.FLG_ICRS | swe.FLG_TRUEPOS


class OracleError(RuntimeError):
    """A body position could not be computed.

    ``constraint`` is filled in by the constraint evaluator when the failure
    happens during a search.
    """

    def __init__(self, body: object, instant: object, detail: str) -> None:
        self.body = body
        self.instant = instant
        self.detail = detail
        self.constraint: object | None = None
        super().__init__(f"Ephemeris lookup failed for {_label(body)} at {_label(instant)}: {detail}")


def _label(value: object) -> str:
    if isinstance(value, Body):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return repr(value)


@runtime_checkable
class LongitudeOracle(Protocol):
    """Anything that can answer "where is this body at this instant?"."""

    async def longitude(self, body: Body, instant: datetime) -> float:
        """Geocentric ecliptic longitude in degrees, in [0, 360)."""
        ...


def datetime_to_jd(dt: datetime) -> float:
    """Convert an aware datetime to a UT Julian Day, at whole-second resolution."""
    utc = dt.astimezone(UTC)
    return swe.julday(utc.year, utc.month, utc.day, utc.hour + utc.minute / 60.0 + utc.second / 3600.0)


class SwissEphemeris:
    """pyswisseph-backed oracle.

    The Swiss Ephemeris keeps global state (the data file path) and is not
    thread-safe; calls are made synchronously from the event loop.
    """

    def __init__(self, ephe_path: str | None = None) -> None:
        self.ephe_path = (ephe_path or "").strip() or None
        swe.set_ephe_path(self.ephe_path)

    def _resolve(self, body: object, instant: object) -> tuple[Body, float]:
        try:
            resolved = Body(body)
        except ValueError:
            raise OracleError(body, instant, "unsupported body") from None
        if not isinstance(instant, datetime):
            raise OracleError(resolved, instant, "instant must be a datetime")
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        return resolved, datetime_to_jd(instant)

    async def longitude(self, body: Body, instant: datetime) -> float:
        resolved, jd = self._resolve(body, instant)
        try:
            result, retflags = swe.calc_ut(jd, BODY_IDS[resolved], CALC_FLAGS)
        except swe.Error as exc:
            raise OracleError(resolved, instant, str(exc)) from exc
        if not retflags & swe.FLG_SWIEPH:
            logger.debug("Swiss Ephemeris files unavailable for %s; Moshier used", resolved.value)

        longitude = result[0] + REFLECTED_BODIES.get(resolved, 0.0)
        return normalize_degree(longitude)
