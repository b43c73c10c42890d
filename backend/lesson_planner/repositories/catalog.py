"""Stage and exercise catalog repositories."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..db.models import ExerciseModel, LessonStageModel
from ..plan_models import CatalogExercise, CatalogStage


def _clean_name(name: str, kind: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError(f"{kind} name cannot be empty.")
    return cleaned


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    return description.strip() or None


def _exercise_to_domain(model: ExerciseModel) -> CatalogExercise:
    return CatalogExercise(
        id=model.id,
        stage_id=model.stage_id,
        name=model.name,
        duration=model.duration,
        description=model.description,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _stage_to_domain(model: LessonStageModel) -> CatalogStage:
    return CatalogStage(
        id=model.id,
        name=model.name,
        description=model.description,
        exercises=[_exercise_to_domain(exercise) for exercise in model.exercises],
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class StageRepository:
    def list(self, session: Session) -> List[CatalogStage]:
        stmt = select(LessonStageModel).options(selectinload(LessonStageModel.exercises)).order_by(LessonStageModel.name)
        return [_stage_to_domain(model) for model in session.execute(stmt).scalars()]

    def get(self, session: Session, stage_id: str) -> CatalogStage | None:
        model = session.get(LessonStageModel, stage_id)
        if model is None:
            return None
        return _stage_to_domain(model)

    def create(self, session: Session, name: str, description: Optional[str] = None) -> CatalogStage:
        model = LessonStageModel(name=_clean_name(name, "Stage"), description=_clean_description(description))
        session.add(model)
        session.flush()
        return _stage_to_domain(model)

    def update(self, session: Session, stage_id: str, name: str, description: Optional[str] = None) -> CatalogStage | None:
        model = session.get(LessonStageModel, stage_id)
        if model is None:
            return None
        model.name = _clean_name(name, "Stage")
        model.description = _clean_description(description)
        session.flush()
        return _stage_to_domain(model)

    def delete(self, session: Session, stage_id: str) -> bool:
        model = session.get(LessonStageModel, stage_id)
        if model is None:
            return False
        session.delete(model)
        session.flush()
        return True


class ExerciseRepository:
    def list_for_stage(self, session: Session, stage_id: str) -> List[CatalogExercise]:
        stmt = select(ExerciseModel).where(ExerciseModel.stage_id == stage_id).order_by(ExerciseModel.name)
        return [_exercise_to_domain(model) for model in session.execute(stmt).scalars()]

    def get(self, session: Session, exercise_id: str) -> CatalogExercise | None:
        model = session.get(ExerciseModel, exercise_id)
        if model is None:
            return None
        return _exercise_to_domain(model)

    def create(
        self,
        session: Session,
        stage_id: str,
        name: str,
        duration: int,
        description: Optional[str] = None,
    ) -> CatalogExercise | None:
        """Create an exercise; returns ``None`` when the stage does not exist."""
        if session.get(LessonStageModel, stage_id) is None:
            return None
        if duration < 0:
            raise ValueError("Exercise duration cannot be negative.")
        model = ExerciseModel(
            stage_id=stage_id,
            name=_clean_name(name, "Exercise"),
            duration=duration,
            description=_clean_description(description),
        )
        session.add(model)
        session.flush()
        return _exercise_to_domain(model)

    def update(
        self,
        session: Session,
        exercise_id: str,
        name: str,
        duration: int,
        description: Optional[str] = None,
    ) -> CatalogExercise | None:
        model = session.get(ExerciseModel, exercise_id)
        if model is None:
            return None
        if duration < 0:
            raise ValueError("Exercise duration cannot be negative.")
        model.name = _clean_name(name, "Exercise")
        model.duration = duration
        model.description = _clean_description(description)
        session.flush()
        return _exercise_to_domain(model)

    def delete(self, session: Session, exercise_id: str) -> bool:
        model = session.get(ExerciseModel, exercise_id)
        if model is None:
            return False
        session.delete(model)
        session.flush()
        return True


stages = StageRepository()
exercises = ExerciseRepository()

__all__ = ["ExerciseRepository", "StageRepository", "exercises", "stages"]
