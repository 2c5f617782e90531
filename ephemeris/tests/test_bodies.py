"""Tests for body tables and sign lookup."""

from ephemeris.bodies import (
    ALL_BODIES,
    ASTEROID_BODIES,
    BODY_IDS,
    REFLECTED_BODIES,
    SIGNS,
    aspect_angle,
    longitude_to_sign,
)
from skyquery.schemas.constraints import AspectKind
from skyquery.schemas.ephemeris import Body, ZodiacSign


def test_longitude_to_sign():
    """Test longitude to sign conversion."""
    assert longitude_to_sign(0.0) == ("Aries", 0.0)
    assert longitude_to_sign(30.0) == ("Taurus", 0.0)
    assert longitude_to_sign(90.0) == ("Cancer", 0.0)
    assert longitude_to_sign(180.0) == ("Libra", 0.0)
    assert longitude_to_sign(270.0) == ("Capricorn", 0.0)

    sign, degree = longitude_to_sign(45.5)
    assert sign is ZodiacSign.TAURUS
    assert abs(degree - 15.5) < 0.001

    # Wraparound
    sign, _ = longitude_to_sign(359.0)
    assert sign is ZodiacSign.PISCES


def test_longitude_to_sign_normalizes_out_of_range_input():
    assert longitude_to_sign(360.0) == (ZodiacSign.ARIES, 0.0)
    assert longitude_to_sign(-30.0) == (ZodiacSign.PISCES, 0.0)
    sign, degree = longitude_to_sign(390.5)
    assert sign is ZodiacSign.TAURUS
    assert abs(degree - 0.5) < 1e-9


def test_sign_degree_stays_below_thirty():
    for i in range(3600):
        _, degree = longitude_to_sign(i / 10.0)
        assert 0.0 <= degree < 30.0


def test_every_body_has_an_ephemeris_id():
    assert set(BODY_IDS) == set(ALL_BODIES)
    assert len(SIGNS) == 12
    assert BODY_IDS[Body.SOUTH_NODE] == BODY_IDS[Body.NORTH_NODE]
    assert REFLECTED_BODIES == {Body.SOUTH_NODE: 180.0}
    assert Body.CHIRON in ASTEROID_BODIES
    assert Body.SUN not in ASTEROID_BODIES


def test_aspect_angles():
    assert aspect_angle(AspectKind.CONJUNCTION) == 0.0
    assert aspect_angle(AspectKind.SEXTILE) == 60.0
    assert aspect_angle(AspectKind.SQUARE) == 90.0
    assert aspect_angle("trine") == 120.0
    assert aspect_angle(AspectKind.OPPOSITION) == 180.0
