"""Pydantic schemas for search constraints and event queries."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from skyquery.schemas.ephemeris import Body, ZodiacSign


class AspectKind(str, Enum):
    """Named target separations between two bodies."""

    CONJUNCTION = "conjunction"
    SEXTILE = "sextile"
    SQUARE = "square"
    TRINE = "trine"
    OPPOSITION = "opposition"


class Direction(str, Enum):
    """Which way a search proceeds from its start instant."""

    FUTURE = "future"
    PAST = "past"


class AspectConstraint(BaseModel):
    """True when two bodies are separated by the aspect angle, within orb."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    kind: Literal["aspect"] = "aspect"
    planet_a: Body = Field(alias="planetA")
    planet_b: Body = Field(alias="planetB")
    aspect: AspectKind
    orb: float = Field(ge=0.0, allow_inf_nan=False)


class InSignConstraint(BaseModel):
    """True while a body is in the given zodiac sign."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    kind: Literal["in_sign"] = "in_sign"
    planet: Body
    sign: ZodiacSign


class AtDegreeConstraint(BaseModel):
    """True when a body's longitude is within orb of an absolute degree."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    kind: Literal["at_degree"] = "at_degree"
    planet: Body
    degree: float = Field(ge=0.0, lt=360.0, allow_inf_nan=False)
    orb: float = Field(ge=0.0, allow_inf_nan=False)


Constraint = Annotated[
    Union[AspectConstraint, InSignConstraint, AtDegreeConstraint],
    Field(discriminator="kind"),
]


class FindEventRequest(BaseModel):
    """Search request: all constraints must hold at the reported instant."""

    model_config = ConfigDict(populate_by_name=True)

    constraints: list[Constraint] = Field(min_length=1)
    direction: Direction
    start_time: str = Field(alias="startTime", min_length=1)


class FindEventResponse(BaseModel):
    timestamp: str


class ParseQueryRequest(BaseModel):
    text: str = Field(min_length=1)


class ParseQueryResponse(BaseModel):
    """Structured search produced from free text."""

    model_config = ConfigDict(populate_by_name=True)

    constraints: list[Constraint] = Field(min_length=1)
    direction: Direction = Direction.FUTURE
    start_time: str | None = Field(default=None, alias="startTime")
