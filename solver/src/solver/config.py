"""Search tuning constants."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from skyquery.config import Settings, get_settings

_ONE_MS = timedelta(milliseconds=1)


@dataclass(frozen=True)
class SolverConfig:
    """Step sizes and iteration caps for :func:`solver.search.find_event`.

    ``fine_window`` is the half-width of the bisection bracket seeded around a
    coarse hit. Together the caps bound a search to
    ``max_coarse_steps + max_bisection_steps + 5`` evaluations.
    """

    coarse_step: timedelta = timedelta(days=1)
    fine_window: timedelta = timedelta(hours=1)
    precision: timedelta = timedelta(seconds=1)
    max_coarse_steps: int = 3650
    max_bisection_steps: int = 100

    def __post_init__(self) -> None:
        for name in ("coarse_step", "fine_window", "precision"):
            value = getattr(self, name)
            if value < _ONE_MS:
                raise ValueError(f"{name} must be at least one millisecond, got {value}")
        if self.max_coarse_steps < 1 or self.max_bisection_steps < 1:
            raise ValueError("iteration caps must be positive")

    @property
    def coarse_step_ms(self) -> int:
        return self.coarse_step // _ONE_MS

    @property
    def fine_window_ms(self) -> int:
        return self.fine_window // _ONE_MS

    @property
    def precision_ms(self) -> int:
        return self.precision // _ONE_MS

    @property
    def max_evaluations(self) -> int:
        return self.max_coarse_steps + self.max_bisection_steps + 5

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> SolverConfig:
        settings = settings or get_settings()
        return cls(
            coarse_step=timedelta(seconds=settings.solver_coarse_step_seconds),
            fine_window=timedelta(seconds=settings.solver_fine_window_seconds),
            precision=timedelta(milliseconds=settings.solver_precision_ms),
            max_coarse_steps=settings.solver_max_coarse_steps,
            max_bisection_steps=settings.solver_max_bisection_steps,
        )


DEFAULT_CONFIG = SolverConfig()
