"""Angular arithmetic on the ecliptic circle."""

from __future__ import annotations

FULL_CIRCLE = 360.0
HALF_CIRCLE = 180.0


def normalize_degree(degree: float) -> float:
    """Fold any angle into [0, 360).

    Values that round up to 360.0 (e.g. ``-1e-15 % 360``) come back as 0.0.
    """
    normalized = ((degree % FULL_CIRCLE) + FULL_CIRCLE) % FULL_CIRCLE
    if normalized >= FULL_CIRCLE:
        return 0.0
    return normalized


def angular_difference(lon1: float, lon2: float) -> float:
    """Signed shortest-path difference from ``lon2`` to ``lon1``, in (-180, 180]."""
    diff = normalize_degree(lon1 - lon2)
    if diff > HALF_CIRCLE:
        diff -= FULL_CIRCLE
    return diff


def angular_distance(lon1: float, lon2: float) -> float:
    """Calculate the shortest angular distance between two longitudes."""
    return abs(angular_difference(lon1, lon2))


def aspect_error(separation: float, angle: float) -> float:
    """How far a separation is from an aspect angle.

    Both the angle and its complement are checked so that a separation which
    straddles the 180 degree fold still matches.
    """
    return min(abs(separation - angle), abs(separation - (FULL_CIRCLE - angle)))
