"""Saved lesson plan endpoints, including text/JSON export and import."""

from __future__ import annotations

import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from .api_models import CopyTitleResponse, PlanImportRequest, PlanImportResponse, TitleCheckResponse
from .config import Settings, get_settings
from .db.session import get_session_dependency
from .errors import PlanImportError, PlanTitleConflictError, PlanValidationError
from .plan_draft import PlanDraft
from .plan_export import export_plan_json, export_plans_json, format_plan_text, import_plan_json, import_plans_json
from .plan_models import LessonPlan, LessonPlanRequest, PlanItemInput
from .repositories.lesson_plans import lesson_plans, validate_plan_request
from .schedule_projection import stage_display_order
from .telemetry import emit_event
from .time_arithmetic import is_valid_time_of_day

router = APIRouter(prefix="/api/lesson-plans", tags=["lesson-plans"])
logger = logging.getLogger(__name__)


def _plan_not_found(plan_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Lesson plan '{plan_id}' was not found.",
    )


def _require_plan(session: Session, plan_id: str) -> LessonPlan:
    plan = lesson_plans.get(session, plan_id)
    if plan is None:
        raise _plan_not_found(plan_id)
    return plan


def _resolve_start_time(start_time: Optional[str], settings: Settings) -> str:
    value = start_time or settings.default_start_time
    if not is_valid_time_of_day(value):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid lesson start time: {value!r}",
        )
    return value


def _validated(payload: LessonPlanRequest, settings: Settings) -> LessonPlanRequest:
    try:
        return validate_plan_request(payload, ceiling=settings.lesson_duration_seconds)
    except PlanValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


def save_plan(session: Session, payload: LessonPlanRequest, settings: Settings) -> LessonPlan:
    """Validate and persist a new plan, enforcing the optional saved-plan cap."""
    request = _validated(payload, settings)
    try:
        plan = lesson_plans.create(session, request)
    except PlanTitleConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if settings.max_saved_plans is not None:
        removed = lesson_plans.prune(session, settings.max_saved_plans)
        if removed:
            logger.info("Pruned %d old lesson plans (cap %d)", removed, settings.max_saved_plans)
    emit_event(
        "lesson_plan_saved",
        plan_id=plan.id,
        item_count=len(plan.items),
        total_duration=plan.total_duration,
    )
    return plan


@router.get("", response_model=List[LessonPlan], status_code=status.HTTP_200_OK)
def list_plans(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    session: Session = Depends(get_session_dependency),
) -> List[LessonPlan]:
    return lesson_plans.list(session, limit=limit)


@router.post("", response_model=LessonPlan, status_code=status.HTTP_201_CREATED)
def create_plan(
    payload: LessonPlanRequest,
    session: Session = Depends(get_session_dependency),
    settings: Settings = Depends(get_settings),
) -> LessonPlan:
    return save_plan(session, payload, settings)


@router.get("/check-title", response_model=TitleCheckResponse, status_code=status.HTTP_200_OK)
def check_title(
    title: str = Query(..., min_length=1),
    exclude_id: Optional[str] = Query(default=None),
    session: Session = Depends(get_session_dependency),
) -> TitleCheckResponse:
    return TitleCheckResponse(title=title, exists=lesson_plans.exists_by_title(session, title, exclude_id))


@router.get("/export", status_code=status.HTTP_200_OK)
def export_all_plans(session: Session = Depends(get_session_dependency)) -> Response:
    return Response(content=export_plans_json(lesson_plans.list(session)), media_type="application/json")


@router.post("/import", response_model=PlanImportResponse, status_code=status.HTTP_201_CREATED)
def import_plans(payload: PlanImportRequest, session: Session = Depends(get_session_dependency)) -> PlanImportResponse:
    """Import one exported plan or an array of them; clashing titles get a copy suffix."""
    try:
        if payload.content.lstrip().startswith("["):
            parsed = import_plans_json(payload.content)
        else:
            parsed = [import_plan_json(payload.content)]
    except PlanImportError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    saved: List[LessonPlan] = []
    for plan in parsed:
        title = plan.title.strip() or plan.id
        if lesson_plans.exists_by_title(session, title):
            title = lesson_plans.next_copy_title(session, title)
        request = LessonPlanRequest(
            title=title,
            items=[PlanItemInput(**item.model_dump(exclude={"id"})) for item in plan.items],
        )
        saved.append(lesson_plans.create(session, request))
    emit_event("lesson_plans_imported", count=len(saved), plan_ids=[plan.id for plan in saved])
    return PlanImportResponse(plans=saved)


@router.get("/{plan_id}", response_model=LessonPlan, status_code=status.HTTP_200_OK)
def get_plan(plan_id: str, session: Session = Depends(get_session_dependency)) -> LessonPlan:
    return _require_plan(session, plan_id)


@router.put("/{plan_id}", response_model=LessonPlan, status_code=status.HTTP_200_OK)
def update_plan(
    plan_id: str,
    payload: LessonPlanRequest,
    session: Session = Depends(get_session_dependency),
    settings: Settings = Depends(get_settings),
) -> LessonPlan:
    request = _validated(payload, settings)
    try:
        plan = lesson_plans.update(session, plan_id, request)
    except PlanTitleConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if plan is None:
        raise _plan_not_found(plan_id)
    emit_event("lesson_plan_updated", plan_id=plan.id, item_count=len(plan.items))
    return plan


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(plan_id: str, session: Session = Depends(get_session_dependency)) -> Response:
    if not lesson_plans.delete(session, plan_id):
        raise _plan_not_found(plan_id)
    emit_event("lesson_plan_deleted", plan_id=plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{plan_id}/copy-title", response_model=CopyTitleResponse, status_code=status.HTTP_200_OK)
def copy_title(plan_id: str, session: Session = Depends(get_session_dependency)) -> CopyTitleResponse:
    plan = _require_plan(session, plan_id)
    return CopyTitleResponse(title=lesson_plans.next_copy_title(session, plan.title))


@router.get("/{plan_id}/draft", response_model=PlanDraft, status_code=status.HTTP_200_OK)
def open_as_draft(
    plan_id: str,
    start_time: Optional[str] = Query(default=None),
    session: Session = Depends(get_session_dependency),
    settings: Settings = Depends(get_settings),
) -> PlanDraft:
    """Load a saved plan as a new editable draft titled as a copy."""
    plan = _require_plan(session, plan_id)
    draft = PlanDraft.from_plan(
        plan,
        lesson_start_time=_resolve_start_time(start_time, settings),
        ceiling=settings.lesson_duration_seconds,
        title=lesson_plans.next_copy_title(session, plan.title),
    )
    return draft.model_copy(update={"warning_band": settings.warning_band_seconds})


@router.get("/{plan_id}/export", status_code=status.HTTP_200_OK)
def export_plan(
    plan_id: str,
    format: Literal["text", "json"] = Query(default="text"),
    start_time: Optional[str] = Query(default=None),
    session: Session = Depends(get_session_dependency),
    settings: Settings = Depends(get_settings),
) -> Response:
    plan = _require_plan(session, plan_id)
    if format == "json":
        return Response(content=export_plan_json(plan), media_type="application/json")
    lesson_start = _resolve_start_time(start_time, settings)
    text = format_plan_text(plan.items, stage_display_order([], plan.items), lesson_start)
    return Response(content=text, media_type="text/plain; charset=utf-8")
