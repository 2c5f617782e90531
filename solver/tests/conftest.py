"""Solver test configuration."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from ephemeris.calculator import OracleError
from skyquery.schemas.ephemeris import Body

EPOCH_2026 = datetime(2026, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)
_DAY_MS = 86_400_000


class LinearSky:
    """Bodies that move at constant speed from a fixed longitude on 2026-01-01.

    ``motions`` maps a body to ``(longitude_at_epoch, degrees_per_day)``; the
    Sun defaults to 0 degrees moving one degree a day.
    """

    def __init__(self, motions: dict[Body, tuple[float, float]] | None = None) -> None:
        self.motions = {Body.SUN: (0.0, 1.0)}
        self.motions.update(motions or {})
        self.calls: list[tuple[Body, datetime]] = []

    async def longitude(self, body: Body, instant: datetime) -> float:
        self.calls.append((body, instant))
        if body not in self.motions:
            raise OracleError(body, instant, "no motion configured")
        start, rate = self.motions[body]
        elapsed_ms = (instant - EPOCH_2026) // _ONE_MS
        return (start + elapsed_ms / _DAY_MS * rate) % 360.0


class FixedSky:
    """Bodies pinned at fixed longitudes; anything else fails like a missing file."""

    def __init__(self, longitudes: dict[Body, float]) -> None:
        self.longitudes = longitudes
        self.calls: list[Body] = []

    async def longitude(self, body: Body, instant: datetime) -> float:
        self.calls.append(body)
        if body not in self.longitudes:
            raise OracleError(body, instant, "ephemeris file not found")
        return self.longitudes[body]


@pytest.fixture
def linear_sky():
    """Factory for :class:`LinearSky` oracles."""
    return LinearSky


@pytest.fixture
def fixed_sky():
    """Factory for :class:`FixedSky` oracles."""
    return FixedSky
