"""Database-backed repository for saved lesson plans."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..db.models import LessonPlanItemModel, LessonPlanModel
from ..duration_budget import LESSON_DURATION_SECONDS, is_over_budget, total_duration
from ..errors import PlanTitleConflictError, PlanValidationError
from ..plan_models import LessonPlan, LessonPlanRequest, PlanItem, PlanItemInput

logger = logging.getLogger(__name__)

MAX_COPY_ATTEMPTS = 1000


def validate_plan_request(request: LessonPlanRequest, *, ceiling: int = LESSON_DURATION_SECONDS) -> LessonPlanRequest:
    """Check a plan is saveable and return it with items renumbered ``1..N`` by position."""
    title = request.title.strip()
    if not title:
        raise PlanValidationError("Plan title is required.")
    if not request.items:
        raise PlanValidationError("Nothing to save: add exercises to the lesson plan first.")
    total = total_duration(request.items)  # type: ignore[arg-type]
    if is_over_budget(total, ceiling):
        raise PlanValidationError(f"Plan lasts {total}s which exceeds the {ceiling}s lesson budget.")
    items = [item.model_copy(update={"order": index}) for index, item in enumerate(request.items, start=1)]
    return LessonPlanRequest(title=title, items=items)


def _item_to_domain(model: LessonPlanItemModel) -> PlanItem:
    return PlanItem(
        id=model.id,
        stage_id=model.stage_id,
        stage_name=model.stage_name,
        exercise_id=model.exercise_id,
        exercise_name=model.exercise_name,
        duration=model.duration,
        order=model.order,
    )


def _to_domain(model: LessonPlanModel) -> LessonPlan:
    return LessonPlan(
        id=model.id,
        title=model.title,
        items=[_item_to_domain(item) for item in sorted(model.items, key=lambda item: item.order)],
        total_duration=model.total_duration,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _item_models(items: Iterable[PlanItemInput]) -> List[LessonPlanItemModel]:
    return [
        LessonPlanItemModel(
            stage_id=item.stage_id,
            stage_name=item.stage_name,
            exercise_id=item.exercise_id,
            exercise_name=item.exercise_name,
            duration=item.duration,
            order=item.order,
        )
        for item in items
    ]


class LessonPlanRepository:
    """Persistence for saved plans. Items are replaced wholesale on update."""

    def list(self, session: Session, limit: Optional[int] = None) -> List[LessonPlan]:
        stmt = (
            select(LessonPlanModel)
            .options(selectinload(LessonPlanModel.items))
            .order_by(LessonPlanModel.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return [_to_domain(model) for model in session.execute(stmt).scalars()]

    def get(self, session: Session, plan_id: str) -> LessonPlan | None:
        model = session.get(LessonPlanModel, plan_id)
        if model is None:
            return None
        return _to_domain(model)

    def exists_by_title(self, session: Session, title: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(func.count()).select_from(LessonPlanModel).where(LessonPlanModel.title == title.strip())
        if exclude_id:
            stmt = stmt.where(LessonPlanModel.id != exclude_id)
        return bool(session.execute(stmt).scalar_one())

    def next_copy_title(self, session: Session, title: str) -> str:
        """First ``"<title> (copy N)"`` not yet used by another plan."""
        base = title.strip()
        for number in range(1, MAX_COPY_ATTEMPTS + 1):
            candidate = f"{base} (copy {number})"
            if not self.exists_by_title(session, candidate):
                return candidate
        raise PlanValidationError(f"Could not find a free copy title for '{base}'.")

    def create(self, session: Session, request: LessonPlanRequest) -> LessonPlan:
        title = request.title.strip()
        if self.exists_by_title(session, title):
            raise PlanTitleConflictError(title)
        model = LessonPlanModel(
            title=title,
            total_duration=total_duration(request.items),  # type: ignore[arg-type]
            items=_item_models(request.items),
        )
        session.add(model)
        session.flush()
        logger.info("Created lesson plan %s with %d items", model.id, len(request.items))
        return _to_domain(model)

    def update(self, session: Session, plan_id: str, request: LessonPlanRequest) -> LessonPlan | None:
        model = session.get(LessonPlanModel, plan_id)
        if model is None:
            return None
        title = request.title.strip()
        if self.exists_by_title(session, title, exclude_id=plan_id):
            raise PlanTitleConflictError(title)

        model.title = title
        model.total_duration = total_duration(request.items)  # type: ignore[arg-type]
        model.updated_at = datetime.now(timezone.utc)
        model.items = _item_models(request.items)
        session.flush()
        logger.info("Updated lesson plan %s with %d items", plan_id, len(request.items))
        return _to_domain(model)

    def delete(self, session: Session, plan_id: str) -> bool:
        model = session.get(LessonPlanModel, plan_id)
        if model is None:
            return False
        session.delete(model)
        session.flush()
        return True

    def prune(self, session: Session, keep: int) -> int:
        """Delete all but the ``keep`` newest plans. Returns the number removed."""
        stmt = select(LessonPlanModel).order_by(LessonPlanModel.created_at.desc()).offset(keep)
        stale = list(session.execute(stmt).scalars())
        for model in stale:
            session.delete(model)
        session.flush()
        return len(stale)


lesson_plans = LessonPlanRepository()

__all__ = ["LessonPlanRepository", "lesson_plans", "validate_plan_request"]
