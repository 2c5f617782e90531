"""Health check."""

from datetime import UTC, datetime

from ephemeris.calculator import OracleError
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from skyquery.schemas.ephemeris import Body

from api.dependencies import get_oracle

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "ok", "service": "skyquery-api"}


@router.get("/health/ready")
async def readiness_check(oracle=Depends(get_oracle)):
    from ephemeris.calculator import OracleError
    from skyquery.schemas.ephemeris import Body

    try:
        await oracle.longitude(Body.SUN, datetime.now(UTC))
        return {"status": "ready"}
    except OracleError as exc:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "error": str(exc)},
        )
