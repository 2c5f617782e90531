"""Body identifiers, sign data, and aspect angles."""

from __future__ import annotations

from skyquery.schemas.constraints import AspectKind
from skyquery.schemas.ephemeris import Body, ZodiacSign

from ephemeris.aspects import normalize_degree

# Celestial body IDs for pyswisseph
# These map to swisseph constants
BODY_IDS: dict[Body, int] = {
    Body.SUN: 0,  # SE_SUN
    Body.MOON: 1,  # SE_MOON
    Body.MERCURY: 2,  # SE_MERCURY
    Body.VENUS: 3,  # SE_VENUS
    Body.MARS: 4,  # SE_MARS
    Body.JUPITER: 5,  # SE_JUPITER
    Body.SATURN: 6,  # SE_SATURN
    Body.URANUS: 7,  # SE_URANUS
    Body.NEPTUNE: 8,  # SE_NEPTUNE
    Body.PLUTO: 9,  # SE_PLUTO
    Body.NORTH_NODE: 11,  # SE_TRUE_NODE (true node, not mean)
    Body.SOUTH_NODE: 11,  # SE_TRUE_NODE, reflected by 180 degrees
    Body.CHIRON: 15,  # SE_CHIRON
    Body.CERES: 17,  # SE_CERES
    Body.PALLAS: 18,  # SE_PALLAS
    Body.JUNO: 19,  # SE_JUNO
    Body.VESTA: 20,  # SE_VESTA
}

# Bodies derived from another body's position by a fixed offset
REFLECTED_BODIES: dict[Body, float] = {
    Body.SOUTH_NODE: 180.0,
}

# Bodies that need the seas_*.se1 asteroid files
ASTEROID_BODIES = frozenset({Body.CHIRON, Body.CERES, Body.PALLAS, Body.JUNO, Body.VESTA})

ALL_BODIES = list(Body)

# Zodiac signs in order
SIGNS: list[ZodiacSign] = list(ZodiacSign)

SIGN_WIDTH = 30.0

# Aspect definitions: kind -> exact angle
ASPECTS: dict[AspectKind, float] = {
    AspectKind.CONJUNCTION: 0.0,
    AspectKind.SEXTILE: 60.0,
    AspectKind.SQUARE: 90.0,
    AspectKind.TRINE: 120.0,
    AspectKind.OPPOSITION: 180.0,
}


def longitude_to_sign(longitude: float) -> tuple[ZodiacSign, float]:
    """Convert ecliptic longitude to sign and degree within sign."""
    longitude = normalize_degree(longitude)
    sign_index = min(int(longitude // SIGN_WIDTH), len(SIGNS) - 1)
    degree = longitude - (sign_index * SIGN_WIDTH)
    return SIGNS[sign_index], degree


def aspect_angle(aspect: AspectKind) -> float:
    """Canonical separation for an aspect kind."""
    return ASPECTS[AspectKind(aspect)]
