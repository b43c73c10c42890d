"""Caller-held state for a plan under construction.

A :class:`PlanDraft` bundles the flat item sequence with the declared stage
order, the lesson start time and the budget ceiling. It is immutable: each
method runs the ordering engine and returns a new draft.

The draft keeps the item sequence aligned with the stage display order.
Declared-but-empty stages live only in ``declared_stage_ids`` while populated
stages live in both places, so after every stage-level change the flat
sequence is regrouped to follow the display order. That way the saved
sequence always matches what the schedule shows.
"""

from __future__ import annotations

import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import ordering
from .duration_budget import LESSON_DURATION_SECONDS, WARNING_BAND_SECONDS, can_add, total_duration
from .errors import BudgetExceededError
from .plan_models import (
    Direction,
    Exercise,
    LessonPlan,
    LessonPlanRequest,
    LessonStage,
    PlanItem,
    PlanItemInput,
    PlanSchedule,
)
from .schedule_projection import project_schedule, stage_display_order
from .time_arithmetic import add_seconds, is_valid_time_of_day

logger = logging.getLogger(__name__)

DEFAULT_LESSON_START_TIME = "14:00:00"


class PlanDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", max_length=200)
    items: List[PlanItem] = Field(default_factory=list)
    declared_stage_ids: List[str] = Field(default_factory=list)
    lesson_start_time: str = DEFAULT_LESSON_START_TIME
    ceiling: int = Field(default=LESSON_DURATION_SECONDS, ge=1)
    warning_band: int = Field(default=WARNING_BAND_SECONDS, ge=0)

    @field_validator("lesson_start_time")
    @classmethod
    def _check_start_time(cls, value: str) -> str:
        if not is_valid_time_of_day(value):
            raise ValueError(f"Invalid lesson start time: {value!r}")
        # Zero-padded HH:MM:SS so every projected time shares one format.
        return add_seconds(value, 0)

    @classmethod
    def from_plan(
        cls,
        plan: LessonPlan,
        *,
        lesson_start_time: str = DEFAULT_LESSON_START_TIME,
        ceiling: int = LESSON_DURATION_SECONDS,
        title: Optional[str] = None,
    ) -> "PlanDraft":
        items = ordering.renormalize(plan.items)
        return cls(
            title=plan.title if title is None else title,
            items=items,
            declared_stage_ids=stage_display_order([], items),
            lesson_start_time=lesson_start_time,
            ceiling=ceiling,
        )

    @property
    def total_duration(self) -> int:
        return total_duration(self.items)

    def stage_order(self) -> List[str]:
        return stage_display_order(self.declared_stage_ids, self.items)

    def _replace(self, *, items: List[PlanItem], stage_order: List[str]) -> "PlanDraft":
        return self.model_copy(
            update={
                "items": ordering.align_to_stage_order(items, stage_order),
                "declared_stage_ids": stage_order,
            }
        )

    def with_title(self, title: str) -> "PlanDraft":
        return self.model_copy(update={"title": title})

    def with_start_time(self, time: str) -> "PlanDraft":
        if not is_valid_time_of_day(time):
            raise ValueError(f"Invalid lesson start time: {time!r}")
        return self.model_copy(update={"lesson_start_time": add_seconds(time, 0)})

    def add_stage(self, stage_id: str, position: Literal["top", "bottom"] = "bottom") -> "PlanDraft":
        order = self.stage_order()
        if stage_id in order:
            return self._replace(items=list(self.items), stage_order=order)
        order = [stage_id, *order] if position == "top" else [*order, stage_id]
        return self._replace(items=list(self.items), stage_order=order)

    def remove_stage(self, stage_id: str) -> "PlanDraft":
        order = [existing for existing in self.stage_order() if existing != stage_id]
        return self._replace(items=ordering.remove_stage(self.items, stage_id), stage_order=order)

    def can_add(self, duration: int) -> bool:
        return can_add(self.total_duration, duration, self.ceiling)

    def add_exercise(self, stage: LessonStage, exercise: Exercise, *, enforce_budget: bool = True) -> "PlanDraft":
        """Append ``exercise`` to the end of ``stage``'s block, declaring the stage if needed."""
        if enforce_budget and not self.can_add(exercise.duration):
            raise BudgetExceededError(self.total_duration, exercise.duration, self.ceiling)
        order = self.stage_order()
        if stage.id not in order:
            order.append(stage.id)
        item = ordering.create_plan_item(stage, exercise, len(self.items) + 1)
        items = ordering.insert_into_stage(self.items, stage.id, item)
        logger.debug("Added exercise %s to stage %s as %s", exercise.id, stage.id, item.id)
        return self._replace(items=items, stage_order=order)

    def remove_item(self, item_id: str) -> "PlanDraft":
        # The stage stays declared even when this empties it.
        return self.model_copy(
            update={
                "items": ordering.remove_item(self.items, item_id),
                "declared_stage_ids": self.stage_order(),
            }
        )

    def move_item_within_stage(self, item_id: str, direction: Direction) -> "PlanDraft":
        return self.model_copy(update={"items": ordering.move_item_within_stage(self.items, item_id, direction)})

    def move_stage(self, stage_id: str, direction: Direction) -> "PlanDraft":
        order = ordering.move_stage_id(self.stage_order(), stage_id, direction)
        return self._replace(items=list(self.items), stage_order=order)

    def schedule(self) -> PlanSchedule:
        return project_schedule(
            self.items,
            self.declared_stage_ids,
            self.lesson_start_time,
            ceiling=self.ceiling,
            warning_band=self.warning_band,
        )

    def to_plan_request(self) -> LessonPlanRequest:
        return LessonPlanRequest(
            title=self.title.strip(),
            items=[
                PlanItemInput(
                    stage_id=item.stage_id,
                    stage_name=item.stage_name,
                    exercise_id=item.exercise_id,
                    exercise_name=item.exercise_name,
                    duration=item.duration,
                    order=item.order,
                )
                for item in ordering.align_to_stage_order(self.items, self.stage_order())
            ],
        )


__all__ = ["DEFAULT_LESSON_START_TIME", "PlanDraft"]
