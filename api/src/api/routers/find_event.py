"""Event search endpoint."""

from __future__ import annotations

import logging

from ephemeris.calculator import LongitudeOracle, OracleError
from fastapi import APIRouter, Depends, HTTPException
from skyquery.schemas.constraints import FindEventRequest, FindEventResponse
from solver.config import SolverConfig
from solver.errors import InvalidQueryError
from solver.search import find_event

from api.dependencies import get_oracle, get_solver_config

logger = logging.getLogger(__name__)

router = APIRouter()


def _describe_oracle_error(exc: OracleError) -> str:
    detail = str(exc)
    constraint = exc.constraint
    if constraint is not None:
        kind = getattr(constraint, "kind", type(constraint).__name__)
        detail = f"{detail} (while evaluating {kind} constraint)"
    return detail


@router.post("/find-event", response_model=FindEventResponse)
async def find_event_endpoint(
    payload: FindEventRequest,
    oracle: LongitudeOracle = Depends(get_oracle),
    config: SolverConfig = Depends(get_solver_config),
):
    try:
        result = await find_event(oracle, payload.constraints, payload.direction, payload.start_time, config)
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except OracleError as exc:
        logger.error("find-event failed: %s", exc)
        raise HTTPException(status_code=500, detail=_describe_oracle_error(exc)) from exc

    if not result.found:
        raise HTTPException(status_code=404, detail="Event not found within search bounds")
    return FindEventResponse(timestamp=result.timestamp)
