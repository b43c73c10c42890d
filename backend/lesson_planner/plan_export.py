"""Text and JSON export/import for lesson plans."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Sequence

from pydantic import ValidationError

from .duration_budget import total_duration
from .errors import PlanImportError
from .ordering import renormalize
from .plan_models import LessonPlan, PlanItem
from .schedule_projection import compute_item_start_times, compute_stage_start_times, group_by_stage
from .time_arithmetic import format_duration, normalize_time

logger = logging.getLogger(__name__)


def format_plan_text(items: Sequence[PlanItem], stage_order: Sequence[str], lesson_start_time: str) -> str:
    """Render a numbered outline with durations and start times.

    Stages without items are skipped and do not take a number.
    """
    if not items:
        return ""

    grouped = group_by_stage(items)
    for stage_items in grouped.values():
        stage_items.sort(key=lambda item: item.order)
    item_start_times = compute_item_start_times(stage_order, grouped, lesson_start_time)
    stage_start_times = compute_stage_start_times(stage_order, grouped, item_start_times, lesson_start_time)
    default_start = normalize_time(lesson_start_time)

    lines: List[str] = []
    stage_number = 1
    for stage_id in stage_order:
        stage_items = grouped.get(stage_id, [])
        if not stage_items:
            continue
        stage_start = stage_start_times.get(stage_id, default_start)
        stage_duration = format_duration(total_duration(stage_items))
        lines.append(f"{stage_number}) {stage_items[0].stage_name} ({stage_duration}) starts at {stage_start}")
        for index, item in enumerate(stage_items, start=1):
            lines.append(
                f"\t{stage_number}.{index}) {item.exercise_name} "
                f"({format_duration(item.duration)}) starts at {item_start_times.get(item.id, stage_start)}"
            )
        stage_number += 1
    return "\n".join(lines)


def export_plan_json(plan: LessonPlan) -> str:
    return json.dumps(plan.model_dump(mode="json"), indent=2, ensure_ascii=False)


def export_plans_json(plans: Iterable[LessonPlan]) -> str:
    return json.dumps([plan.model_dump(mode="json") for plan in plans], indent=2, ensure_ascii=False)


def _coerce_plan(raw: Any) -> LessonPlan:
    if not isinstance(raw, dict) or not raw.get("id") or not isinstance(raw.get("items"), list):
        raise PlanImportError("Invalid lesson plan format: 'id' and an 'items' list are required.")
    try:
        plan = LessonPlan.model_validate(raw)
    except ValidationError as exc:
        raise PlanImportError(f"Invalid lesson plan format: {exc}") from exc
    items = renormalize(plan.items)
    return plan.model_copy(
        update={
            "items": items,
            "total_duration": total_duration(items),
            "updated_at": datetime.now(timezone.utc),
        }
    )


def _load(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise PlanImportError(f"Lesson plan JSON could not be parsed: {exc.msg}") from exc


def import_plan_json(text: str) -> LessonPlan:
    """Parse one exported plan; ``total_duration`` and item order are recomputed."""
    return _coerce_plan(_load(text))


def import_plans_json(text: str) -> List[LessonPlan]:
    raw = _load(text)
    if not isinstance(raw, list):
        raise PlanImportError("Expected a JSON array of lesson plans.")
    plans = [_coerce_plan(entry) for entry in raw]
    logger.info("Imported %d lesson plans", len(plans))
    return plans


__all__ = [
    "export_plan_json",
    "export_plans_json",
    "format_plan_text",
    "import_plan_json",
    "import_plans_json",
]
