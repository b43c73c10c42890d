"""Value objects shared by the planning engine, the API and persistence."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Direction = Literal["up", "down"]


class Exercise(BaseModel):
    """Catalog exercise as seen by the planner."""

    id: str
    name: str
    duration: int = Field(ge=0, description="Seconds.")
    description: Optional[str] = None


class LessonStage(BaseModel):
    """Catalog stage with its available exercises."""

    id: str
    name: str
    description: Optional[str] = None
    exercises: List[Exercise] = Field(default_factory=list)

    def find_exercise(self, exercise_id: str) -> Optional[Exercise]:
        return next((exercise for exercise in self.exercises if exercise.id == exercise_id), None)


class CatalogExercise(Exercise):
    stage_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CatalogStage(LessonStage):
    exercises: List[CatalogExercise] = Field(default_factory=list)  # type: ignore[assignment]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PlanItem(BaseModel):
    """One placement of an exercise inside a stage.

    ``stage_name`` and ``exercise_name`` are snapshots taken when the item is
    created; renaming the catalog entry later does not change saved plans.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    stage_id: str
    stage_name: str
    exercise_id: str
    exercise_name: str
    duration: int = Field(ge=0)
    order: int = Field(default=1, ge=1)


class LessonPlan(BaseModel):
    id: str
    title: str
    items: List[PlanItem] = Field(default_factory=list)
    total_duration: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class PlanItemInput(BaseModel):
    """Flat item shape accepted when saving a plan."""

    stage_id: str = Field(..., min_length=1)
    stage_name: str
    exercise_id: str = Field(..., min_length=1)
    exercise_name: str
    duration: int = Field(ge=0)
    order: int = Field(default=1, ge=1)


class LessonPlanRequest(BaseModel):
    title: str = Field(..., max_length=200)
    items: List[PlanItemInput] = Field(default_factory=list)


class BudgetStatus(BaseModel):
    total: int
    ceiling: int
    remaining: int
    is_over: bool
    is_near_limit: bool


class PlanSchedule(BaseModel):
    """Read-only projection of a plan: grouping, start times and budget."""

    stage_order: List[str] = Field(default_factory=list)
    grouped: Dict[str, List[PlanItem]] = Field(default_factory=dict)
    item_start_times: Dict[str, str] = Field(default_factory=dict)
    stage_start_times: Dict[str, str] = Field(default_factory=dict)
    stage_durations: Dict[str, int] = Field(default_factory=dict)
    total_duration: int = 0
    budget: BudgetStatus


__all__ = [
    "BudgetStatus",
    "CatalogExercise",
    "CatalogStage",
    "Direction",
    "Exercise",
    "LessonPlan",
    "LessonPlanRequest",
    "LessonStage",
    "PlanItem",
    "PlanItemInput",
    "PlanSchedule",
]
