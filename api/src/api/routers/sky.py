"""Ephemeris lookup endpoints."""

from __future__ import annotations

import logging

from ephemeris.bodies import ALL_BODIES, longitude_to_sign
from ephemeris.calculator import LongitudeOracle, OracleError
from fastapi import APIRouter, Depends, HTTPException
from skyquery.schemas.ephemeris import (
    PlanetLongitudeRequest,
    PlanetLongitudeResponse,
    PlanetPosition,
    SkyAtRequest,
    SkyAtResponse,
)
from solver.errors import InvalidQueryError
from solver.instants import parse_instant

from api.dependencies import get_oracle

logger = logging.getLogger(__name__)

router = APIRouter()


def _timestamp_or_400(value: str):
    try:
        return parse_instant(value)
    except InvalidQueryError:
        raise HTTPException(status_code=400, detail="Invalid or missing timestamp") from None


@router.post("/sky-at", response_model=SkyAtResponse)
async def sky_at(payload: SkyAtRequest, oracle: LongitudeOracle = Depends(get_oracle)):
    instant = _timestamp_or_400(payload.timestamp)
    planets: list[PlanetPosition] = []
    try:
        for body in ALL_BODIES:
            longitude = await oracle.longitude(body, instant)
            sign, degree = longitude_to_sign(longitude)
            planets.append(PlanetPosition(planet=body, longitude=longitude, sign=sign, degree=degree))
    except OracleError as exc:
        logger.error("sky-at failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return SkyAtResponse(planets=planets)


@router.post("/planet-longitude", response_model=PlanetLongitudeResponse)
async def planet_longitude(payload: PlanetLongitudeRequest, oracle: LongitudeOracle = Depends(get_oracle)):
    instant = _timestamp_or_400(payload.timestamp)
    try:
        longitude = await oracle.longitude(payload.planet, instant)
    except OracleError as exc:
        logger.error("planet-longitude failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return PlanetLongitudeResponse(longitude=longitude)
