"""Catalog endpoints: lesson stages and their exercises."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from .api_models import ExerciseRequest, StageRequest
from .db.session import get_session_dependency
from .plan_models import CatalogExercise, CatalogStage
from .repositories.catalog import exercises, stages

router = APIRouter(prefix="/api", tags=["catalog"])
logger = logging.getLogger(__name__)


def _stage_not_found(stage_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Stage '{stage_id}' was not found.",
    )


def _exercise_not_found(exercise_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Exercise '{exercise_id}' was not found.",
    )


def _unprocessable(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@router.get("/stages", response_model=List[CatalogStage], status_code=status.HTTP_200_OK)
def list_stages(session: Session = Depends(get_session_dependency)) -> List[CatalogStage]:
    return stages.list(session)


@router.get("/stages/{stage_id}", response_model=CatalogStage, status_code=status.HTTP_200_OK)
def get_stage(stage_id: str, session: Session = Depends(get_session_dependency)) -> CatalogStage:
    stage = stages.get(session, stage_id)
    if stage is None:
        raise _stage_not_found(stage_id)
    return stage


@router.post("/stages", response_model=CatalogStage, status_code=status.HTTP_201_CREATED)
def create_stage(payload: StageRequest, session: Session = Depends(get_session_dependency)) -> CatalogStage:
    try:
        stage = stages.create(session, payload.name, payload.description)
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    logger.info("Created stage %s (%s)", stage.id, stage.name)
    return stage


@router.put("/stages/{stage_id}", response_model=CatalogStage, status_code=status.HTTP_200_OK)
def update_stage(
    stage_id: str,
    payload: StageRequest,
    session: Session = Depends(get_session_dependency),
) -> CatalogStage:
    try:
        stage = stages.update(session, stage_id, payload.name, payload.description)
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    if stage is None:
        raise _stage_not_found(stage_id)
    return stage


@router.delete("/stages/{stage_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stage(stage_id: str, session: Session = Depends(get_session_dependency)) -> Response:
    if not stages.delete(session, stage_id):
        raise _stage_not_found(stage_id)
    logger.info("Deleted stage %s", stage_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stages/{stage_id}/exercises", response_model=List[CatalogExercise], status_code=status.HTTP_200_OK)
def list_stage_exercises(stage_id: str, session: Session = Depends(get_session_dependency)) -> List[CatalogExercise]:
    if stages.get(session, stage_id) is None:
        raise _stage_not_found(stage_id)
    return exercises.list_for_stage(session, stage_id)


@router.post("/stages/{stage_id}/exercises", response_model=CatalogExercise, status_code=status.HTTP_201_CREATED)
def create_exercise(
    stage_id: str,
    payload: ExerciseRequest,
    session: Session = Depends(get_session_dependency),
) -> CatalogExercise:
    try:
        exercise = exercises.create(session, stage_id, payload.name, payload.duration, payload.description)
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    if exercise is None:
        raise _stage_not_found(stage_id)
    return exercise


@router.get("/exercises/{exercise_id}", response_model=CatalogExercise, status_code=status.HTTP_200_OK)
def get_exercise(exercise_id: str, session: Session = Depends(get_session_dependency)) -> CatalogExercise:
    exercise = exercises.get(session, exercise_id)
    if exercise is None:
        raise _exercise_not_found(exercise_id)
    return exercise


@router.put("/exercises/{exercise_id}", response_model=CatalogExercise, status_code=status.HTTP_200_OK)
def update_exercise(
    exercise_id: str,
    payload: ExerciseRequest,
    session: Session = Depends(get_session_dependency),
) -> CatalogExercise:
    try:
        exercise = exercises.update(session, exercise_id, payload.name, payload.duration, payload.description)
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    if exercise is None:
        raise _exercise_not_found(exercise_id)
    return exercise


@router.delete("/exercises/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exercise(exercise_id: str, session: Session = Depends(get_session_dependency)) -> Response:
    if not exercises.delete(session, exercise_id):
        raise _exercise_not_found(exercise_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
