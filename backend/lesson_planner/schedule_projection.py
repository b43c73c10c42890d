"""Derived views over a plan: grouping by stage, start times, budget flags.

Everything here is recomputed from scratch from the flat item sequence, the
declared stage order and the lesson start time. There is no cached or
incremental path.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence

from .duration_budget import LESSON_DURATION_SECONDS, WARNING_BAND_SECONDS, budget_status, total_duration
from .plan_models import PlanItem, PlanSchedule
from .time_arithmetic import add_seconds, normalize_time

GroupedItems = Mapping[str, Sequence[PlanItem]]


def group_by_stage(sequence: Iterable[PlanItem]) -> Dict[str, List[PlanItem]]:
    """Partition items by stage id, keeping their relative order."""
    grouped: Dict[str, List[PlanItem]] = {}
    for item in sequence:
        grouped.setdefault(item.stage_id, []).append(item)
    return grouped


def stage_display_order(declared_stage_ids: Iterable[str], sequence: Iterable[PlanItem]) -> List[str]:
    """Declared stage ids first, then stages discovered in the sequence."""
    order: List[str] = []
    seen = set()
    for stage_id in declared_stage_ids:
        if stage_id not in seen:
            order.append(stage_id)
            seen.add(stage_id)
    for item in sequence:
        if item.stage_id not in seen:
            order.append(item.stage_id)
            seen.add(item.stage_id)
    return order


def compute_item_start_times(
    stage_order: Sequence[str],
    grouped: GroupedItems,
    lesson_start_time: str,
) -> Dict[str, str]:
    clock = normalize_time(lesson_start_time)
    start_times: Dict[str, str] = {}
    for stage_id in stage_order:
        for item in grouped.get(stage_id, ()):
            start_times[item.id] = clock
            clock = add_seconds(clock, item.duration)
    return start_times


def compute_stage_start_times(
    stage_order: Sequence[str],
    grouped: GroupedItems,
    item_start_times: Mapping[str, str],
    lesson_start_time: str,
) -> Dict[str, str]:
    """A stage starts with its first item; an empty stage starts when the stages before it end."""
    clock = normalize_time(lesson_start_time)
    start_times: Dict[str, str] = {}
    for stage_id in stage_order:
        stage_items = grouped.get(stage_id, ())
        if stage_items:
            start_times[stage_id] = item_start_times.get(stage_items[0].id, clock)
        else:
            start_times[stage_id] = clock
        for item in stage_items:
            clock = add_seconds(clock, item.duration)
    return start_times


def project_schedule(
    sequence: Sequence[PlanItem],
    declared_stage_ids: Iterable[str],
    lesson_start_time: str,
    *,
    ceiling: int = LESSON_DURATION_SECONDS,
    warning_band: int = WARNING_BAND_SECONDS,
) -> PlanSchedule:
    grouped = group_by_stage(sequence)
    stage_order = stage_display_order(declared_stage_ids, sequence)
    item_start_times = compute_item_start_times(stage_order, grouped, lesson_start_time)
    stage_start_times = compute_stage_start_times(stage_order, grouped, item_start_times, lesson_start_time)
    total = total_duration(sequence)
    return PlanSchedule(
        stage_order=stage_order,
        grouped=grouped,
        item_start_times=item_start_times,
        stage_start_times=stage_start_times,
        stage_durations={stage_id: total_duration(grouped.get(stage_id, ())) for stage_id in stage_order},
        total_duration=total,
        budget=budget_status(total, ceiling, warning_band),
    )


__all__ = [
    "GroupedItems",
    "compute_item_start_times",
    "compute_stage_start_times",
    "group_by_stage",
    "project_schedule",
    "stage_display_order",
]
