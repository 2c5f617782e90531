"""Turn free-text questions into structured event searches via an LLM."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum

from skyquery.schemas.constraints import AspectKind, Direction, ParseQueryResponse
from skyquery.schemas.ephemeris import Body, ZodiacSign
from skyquery.services.llm_client import LLMClient, generate_with_validation

logger = logging.getLogger(__name__)


def _enum_values(enum_cls: type[Enum]) -> str:
    return ", ".join(f'"{member.value}"' for member in enum_cls)


SYSTEM_PROMPT = """\
You are an expert astrological event parser. Convert natural language questions \
about astrological events into a JSON object used to call an event finder. \
Output only the JSON object, nothing else.

Schema:
type FindEventRequest = {{
  constraints: Constraint[];
  direction: Direction;
  startTime: string; // ISO 8601, UTC
}}

type Constraint = AspectConstraint | InSignConstraint | AtDegreeConstraint;

type AspectConstraint = {{
  kind: "aspect";
  planetA: Body;
  planetB: Body;
  aspect: AspectKind;
  orb: number; // degrees, e.g. 1.5
}}

type InSignConstraint = {{
  kind: "in_sign";
  planet: Body;
  sign: ZodiacSign;
}}

type AtDegreeConstraint = {{
  kind: "at_degree";
  planet: Body;
  degree: number; // absolute zodiacal degree, 0 to 359.99
  orb: number; // degrees, e.g. 0.5
}}

Enum values:
Body: {bodies}
AspectKind: {aspects}
ZodiacSign: {signs}
Direction: {directions}

Instructions:
- Every constraint needs its "kind".
- If no orb is mentioned, use 2 for aspects and 1 for degrees.
- "next", "when will" and similar mean "future"; "last", "when was" mean "past".
- If no start time is mentioned, use the current time: {now}.
"""


def build_messages(text: str, now: datetime) -> list[dict[str, str]]:
    system = SYSTEM_PROMPT.format(
        bodies=_enum_values(Body),
        aspects=_enum_values(AspectKind),
        signs=_enum_values(ZodiacSign),
        directions=_enum_values(Direction),
        now=now.isoformat(),
    )
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": text},
    ]


def _validate(data: object) -> None:
    ParseQueryResponse.model_validate(data)


async def parse_query(client: LLMClient, slot: str, text: str, now: datetime | None = None) -> ParseQueryResponse:
    """Parse ``text`` into constraints, a direction and a start time.

    The output is advisory: callers must still validate it before searching.
    """
    now = now or datetime.now(UTC)
    data = await generate_with_validation(
        client,
        slot,
        build_messages(text, now),
        _validate,
        response_format={"type": "json_object"},
    )
    parsed = ParseQueryResponse.model_validate(data)
    if not parsed.start_time:
        parsed = parsed.model_copy(update={"start_time": now.isoformat()})
    logger.info("Parsed query into %d constraint(s), direction=%s", len(parsed.constraints), parsed.direction.value)
    return parsed
