"""ORM models for the stage/exercise catalog and saved lesson plans."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


def _new_id() -> str:
    return str(uuid.uuid4())


class LessonStageModel(TimestampMixin, Base):
    __tablename__ = "lesson_stages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    exercises: Mapped[list["ExerciseModel"]] = relationship(
        back_populates="stage",
        cascade="all, delete-orphan",
        order_by="ExerciseModel.name",
    )


class ExerciseModel(TimestampMixin, Base):
    __tablename__ = "exercises"
    __table_args__ = (Index("ix_exercises_stage_id", "stage_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    stage_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("lesson_stages.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    stage: Mapped[LessonStageModel] = relationship(back_populates="exercises")


class LessonPlanModel(TimestampMixin, Base):
    __tablename__ = "lesson_plans"
    __table_args__ = (Index("ix_lesson_plans_title", "title", unique=True),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    total_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    items: Mapped[list["LessonPlanItemModel"]] = relationship(
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="LessonPlanItemModel.order",
    )


class LessonPlanItemModel(Base):
    __tablename__ = "lesson_plan_items"
    __table_args__ = (Index("ix_lesson_plan_items_plan_order", "plan_id", "order"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    plan_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("lesson_plans.id", ondelete="CASCADE"), nullable=False
    )
    # Names are snapshots; no foreign keys back into the catalog.
    stage_id: Mapped[str] = mapped_column(String(36), nullable=False)
    stage_name: Mapped[str] = mapped_column(String(200), nullable=False)
    exercise_id: Mapped[str] = mapped_column(String(36), nullable=False)
    exercise_name: Mapped[str] = mapped_column(String(200), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    order: Mapped[int] = mapped_column("order", Integer, nullable=False)

    plan: Mapped[LessonPlanModel] = relationship(back_populates="items")


__all__ = [
    "ExerciseModel",
    "LessonPlanItemModel",
    "LessonPlanModel",
    "LessonStageModel",
]
