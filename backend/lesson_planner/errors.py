"""Domain errors raised by the planner and translated to HTTP responses by the routers."""

from __future__ import annotations


class BudgetExceededError(ValueError):
    """Adding an exercise would push the plan past its duration ceiling."""

    def __init__(self, current_total: int, candidate_duration: int, ceiling: int) -> None:
        self.current_total = current_total
        self.candidate_duration = candidate_duration
        self.ceiling = ceiling
        super().__init__(
            f"Not enough time left for this exercise: {current_total}s used, "
            f"{candidate_duration}s requested, {ceiling}s available."
        )


class PlanValidationError(ValueError):
    """A plan cannot be saved in its current shape."""


class PlanTitleConflictError(PlanValidationError):
    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(f"A lesson plan titled '{title}' already exists.")


class PlanImportError(ValueError):
    """Imported plan JSON is malformed."""


__all__ = [
    "BudgetExceededError",
    "PlanImportError",
    "PlanTitleConflictError",
    "PlanValidationError",
]
