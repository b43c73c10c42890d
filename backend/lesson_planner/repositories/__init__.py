"""Database-backed repositories."""

from .catalog import ExerciseRepository, StageRepository, exercises, stages
from .lesson_plans import LessonPlanRepository, lesson_plans, validate_plan_request

__all__ = [
    "ExerciseRepository",
    "LessonPlanRepository",
    "StageRepository",
    "exercises",
    "lesson_plans",
    "stages",
    "validate_plan_request",
]
