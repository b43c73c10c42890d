"""Lesson duration budget checks."""

from __future__ import annotations

from typing import Iterable

from .plan_models import BudgetStatus, PlanItem

LESSON_DURATION_SECONDS = 5400
WARNING_BAND_SECONDS = 600


def total_duration(items: Iterable[PlanItem]) -> int:
    return sum(item.duration for item in items)


def can_add(current_total: int, candidate_duration: int, ceiling: int = LESSON_DURATION_SECONDS) -> bool:
    """True when adding ``candidate_duration`` keeps the plan within ``ceiling``."""
    return current_total + candidate_duration <= ceiling


def is_over_budget(total: int, ceiling: int = LESSON_DURATION_SECONDS) -> bool:
    return total > ceiling


def is_near_limit(
    total: int,
    ceiling: int = LESSON_DURATION_SECONDS,
    warning_band: int = WARNING_BAND_SECONDS,
) -> bool:
    return ceiling - warning_band < total <= ceiling


def budget_status(
    total: int,
    ceiling: int = LESSON_DURATION_SECONDS,
    warning_band: int = WARNING_BAND_SECONDS,
) -> BudgetStatus:
    return BudgetStatus(
        total=total,
        ceiling=ceiling,
        remaining=ceiling - total,
        is_over=is_over_budget(total, ceiling),
        is_near_limit=is_near_limit(total, ceiling, warning_band),
    )


__all__ = [
    "LESSON_DURATION_SECONDS",
    "WARNING_BAND_SECONDS",
    "budget_status",
    "can_add",
    "is_near_limit",
    "is_over_budget",
    "total_duration",
]
