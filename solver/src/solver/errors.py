"""Solver error taxonomy.

Three outcomes leave a search: an instant, "not found" (a normal empty
result, never an exception), or one of the errors below.
"""

from __future__ import annotations

from ephemeris.calculator import OracleError

__all__ = ["InvalidQueryError", "OracleError"]


class InvalidQueryError(ValueError):
    """The query is malformed; detected before any ephemeris lookup."""
