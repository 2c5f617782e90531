"""Validate untrusted search input before any ephemeris lookup."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError
from skyquery.schemas.constraints import (
    AspectConstraint,
    AtDegreeConstraint,
    Constraint,
    FindEventRequest,
    InSignConstraint,
)

from solver.errors import InvalidQueryError

_CONSTRAINT_TYPES = (AspectConstraint, InSignConstraint, AtDegreeConstraint)
_constraint_adapter: TypeAdapter[Constraint] = TypeAdapter(Constraint)


def describe_validation_error(exc: ValidationError) -> str:
    """One-line summary of a pydantic validation error."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid input"


def validate_constraint(item: object) -> Constraint:
    if isinstance(item, _CONSTRAINT_TYPES):
        return item
    if isinstance(item, Mapping):
        kind = item.get("kind")
        if kind not in ("aspect", "in_sign", "at_degree"):
            raise InvalidQueryError(f"Unknown constraint kind: {kind}")
        try:
            return _constraint_adapter.validate_python(dict(item))
        except ValidationError as exc:
            raise InvalidQueryError(f"Invalid {kind} constraint: {describe_validation_error(exc)}") from exc
    raise InvalidQueryError(f"Unknown constraint kind: {type(item).__name__}")


def validate_constraints(items: Iterable[object]) -> list[Constraint]:
    """Typed constraints from models or plain mappings.

    An empty result is allowed here; rejecting it is up to the caller.
    """
    if isinstance(items, (str, bytes, Mapping)):
        raise InvalidQueryError("Constraints must be a list")
    return [validate_constraint(item) for item in items]


def parse_find_event_request(payload: Any) -> FindEventRequest:
    """Validate a raw ``{constraints, direction, startTime}`` payload."""
    if not isinstance(payload, Mapping):
        raise InvalidQueryError("Request body must be a JSON object")
    constraints = payload.get("constraints")
    if not isinstance(constraints, list) or not constraints:
        raise InvalidQueryError("Constraints are required")
    validated = validate_constraints(constraints)
    try:
        return FindEventRequest.model_validate({**payload, "constraints": validated})
    except ValidationError as exc:
        raise InvalidQueryError(describe_validation_error(exc)) from exc
