"""Request and response payloads for the HTTP API."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .plan_draft import PlanDraft
from .plan_models import Direction, LessonPlan, PlanSchedule

PlannerOperationName = Literal[
    "add_stage",
    "remove_stage",
    "add_exercise",
    "remove_item",
    "move_item",
    "move_stage",
    "set_start_time",
]

_REQUIRED_FIELDS = {
    "add_stage": ("stage_id",),
    "remove_stage": ("stage_id",),
    "add_exercise": ("stage_id", "exercise_id"),
    "remove_item": ("item_id",),
    "move_item": ("item_id", "direction"),
    "move_stage": ("stage_id", "direction"),
    "set_start_time": ("start_time",),
}


class StageRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)


class ExerciseRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    duration: int = Field(..., ge=0, description="Seconds.")
    description: Optional[str] = Field(default=None, max_length=2000)


class TitleCheckResponse(BaseModel):
    title: str
    exists: bool


class CopyTitleResponse(BaseModel):
    title: str


class PlanImportRequest(BaseModel):
    content: str = Field(..., min_length=1)


class PlanImportResponse(BaseModel):
    plans: List[LessonPlan] = Field(default_factory=list)


class PlannerOperationRequest(BaseModel):
    """One edit applied to a client-held draft."""

    draft: PlanDraft = Field(default_factory=PlanDraft)
    operation: PlannerOperationName
    stage_id: Optional[str] = None
    exercise_id: Optional[str] = None
    item_id: Optional[str] = None
    direction: Optional[Direction] = None
    position: Literal["top", "bottom"] = "bottom"
    start_time: Optional[str] = None
    enforce_budget: bool = True

    @model_validator(mode="after")
    def _check_required_fields(self) -> "PlannerOperationRequest":
        missing = [name for name in _REQUIRED_FIELDS[self.operation] if getattr(self, name) in (None, "")]
        if missing:
            raise ValueError(f"Operation '{self.operation}' requires: {', '.join(missing)}")
        return self


class PlannerResponse(BaseModel):
    draft: PlanDraft
    schedule: PlanSchedule


__all__ = [
    "CopyTitleResponse",
    "ExerciseRequest",
    "PlanImportRequest",
    "PlanImportResponse",
    "PlannerOperationName",
    "PlannerOperationRequest",
    "PlannerResponse",
    "StageRequest",
    "TitleCheckResponse",
]
