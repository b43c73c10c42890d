"""Stateless planner endpoints.

The client holds the draft; each call sends it back together with one
operation and receives the new draft plus its recomputed schedule.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .api_models import PlannerOperationRequest, PlannerResponse
from .config import Settings, get_settings
from .db.session import get_session_dependency
from .errors import BudgetExceededError
from .plan_draft import PlanDraft
from .plan_models import LessonPlan
from .plan_routes import save_plan
from .repositories.catalog import stages
from .telemetry import emit_event

router = APIRouter(prefix="/api/planner", tags=["planner"])
logger = logging.getLogger(__name__)


def _respond(draft: PlanDraft) -> PlannerResponse:
    return PlannerResponse(draft=draft, schedule=draft.schedule())


def _add_exercise(session: Session, payload: PlannerOperationRequest) -> PlanDraft:
    stage_id = payload.stage_id or ""
    exercise_id = payload.exercise_id or ""
    stage = stages.get(session, stage_id)
    if stage is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Stage '{stage_id}' was not found.",
        )
    exercise = stage.find_exercise(exercise_id)
    if exercise is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Exercise '{exercise_id}' was not found in stage '{stage_id}'.",
        )
    try:
        return payload.draft.add_exercise(stage, exercise, enforce_budget=payload.enforce_budget)
    except BudgetExceededError as exc:
        emit_event(
            "budget_refused",
            stage_id=stage_id,
            exercise_id=exercise_id,
            current_total=exc.current_total,
            candidate_duration=exc.candidate_duration,
            ceiling=exc.ceiling,
        )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


def apply_operation(session: Session, payload: PlannerOperationRequest) -> PlanDraft:
    draft = payload.draft
    operation = payload.operation
    if operation == "add_stage":
        return draft.add_stage(payload.stage_id or "", payload.position)
    if operation == "remove_stage":
        return draft.remove_stage(payload.stage_id or "")
    if operation == "add_exercise":
        return _add_exercise(session, payload)
    if operation == "remove_item":
        return draft.remove_item(payload.item_id or "")
    if operation == "move_item":
        return draft.move_item_within_stage(payload.item_id or "", payload.direction or "up")
    if operation == "move_stage":
        return draft.move_stage(payload.stage_id or "", payload.direction or "up")
    try:
        return draft.with_start_time(payload.start_time or "")
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.post("/schedule", response_model=PlannerResponse, status_code=status.HTTP_200_OK)
def project(draft: PlanDraft) -> PlannerResponse:
    return _respond(draft)


@router.post("/operations", response_model=PlannerResponse, status_code=status.HTTP_200_OK)
def apply(payload: PlannerOperationRequest, session: Session = Depends(get_session_dependency)) -> PlannerResponse:
    draft = apply_operation(session, payload)
    logger.debug("Applied %s; draft now has %d items", payload.operation, len(draft.items))
    return _respond(draft)


@router.post("/save", response_model=LessonPlan, status_code=status.HTTP_201_CREATED)
def save_draft(
    draft: PlanDraft,
    session: Session = Depends(get_session_dependency),
    settings: Settings = Depends(get_settings),
) -> LessonPlan:
    return save_plan(session, draft.to_plan_request(), settings)
