"""Pydantic schemas for ephemeris data."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Body(str, Enum):
    """Celestial bodies tracked by longitude."""

    SUN = "Sun"
    MOON = "Moon"
    MERCURY = "Mercury"
    VENUS = "Venus"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"
    PLUTO = "Pluto"
    NORTH_NODE = "NorthNode"
    SOUTH_NODE = "SouthNode"
    CHIRON = "Chiron"
    JUNO = "Juno"
    PALLAS = "Pallas"
    CERES = "Ceres"
    VESTA = "Vesta"


class ZodiacSign(str, Enum):
    """The twelve 30-degree segments of the ecliptic, in order from 0 degrees."""

    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"


class PlanetPosition(BaseModel):
    """Position of a celestial body."""

    planet: Body
    longitude: float = Field(ge=0.0, lt=360.0)
    sign: ZodiacSign
    degree: float = Field(ge=0.0, lt=30.0)  # within sign


class SkyAtRequest(BaseModel):
    timestamp: str


class SkyAtResponse(BaseModel):
    planets: list[PlanetPosition]


class PlanetLongitudeRequest(BaseModel):
    planet: Body
    timestamp: str


class PlanetLongitudeResponse(BaseModel):
    longitude: float
