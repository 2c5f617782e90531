"""Natural-language query endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from skyquery.schemas.constraints import ParseQueryRequest, ParseQueryResponse
from skyquery.services.llm_client import LLMClient

from api.dependencies import QUERY_PARSER_SLOT, get_llm_client
from api.services.query_parser import parse_query

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/parse-query", response_model=ParseQueryResponse)
async def parse_query_endpoint(payload: ParseQueryRequest, client: LLMClient = Depends(get_llm_client)):
    text = payload.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Text query is required and must be a string")
    try:
        return await parse_query(client, QUERY_PARSER_SLOT, text)
    except (RuntimeError, ValueError) as exc:
        logger.warning("Query parsing failed: %s", exc)
        raise HTTPException(status_code=502, detail=f"Query parsing failed: {exc}") from exc
