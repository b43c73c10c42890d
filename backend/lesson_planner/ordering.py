"""Ordering engine for the flat plan item sequence.

The plan is stored as one flat list of :class:`PlanItem` objects in which the
items of a stage always form a single contiguous block. Every operation here
is pure: it returns a fresh list with ``order`` renumbered ``1..N`` by
position and leaves its input untouched. Boundary cases (unknown ids, moving
the first block up, moving past a stage edge) are no-ops, not errors.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple
from uuid import uuid4

from .plan_models import Direction, Exercise, LessonStage, PlanItem
from .schedule_projection import group_by_stage

logger = logging.getLogger(__name__)

PlanSequence = Sequence[PlanItem]


def _check_direction(direction: str) -> Direction:
    if direction not in ("up", "down"):
        raise ValueError(f"Unsupported move direction: {direction!r}")
    return direction  # type: ignore[return-value]


def _index_of(sequence: PlanSequence, item_id: str) -> int:
    return next((index for index, item in enumerate(sequence) if item.id == item_id), -1)


def _stage_block(sequence: PlanSequence, start: int) -> Tuple[int, int]:
    """Return ``[begin, end)`` of the stage block containing ``start``."""
    stage_id = sequence[start].stage_id
    begin = start
    while begin > 0 and sequence[begin - 1].stage_id == stage_id:
        begin -= 1
    end = start + 1
    while end < len(sequence) and sequence[end].stage_id == stage_id:
        end += 1
    return begin, end


def create_plan_item(stage: LessonStage, exercise: Exercise, order: int = 1, *, item_id: Optional[str] = None) -> PlanItem:
    """Snapshot a catalog stage/exercise pair into a new plan item."""
    return PlanItem(
        id=item_id or f"item-{uuid4().hex}",
        stage_id=stage.id,
        stage_name=stage.name,
        exercise_id=exercise.id,
        exercise_name=exercise.name,
        duration=exercise.duration,
        order=max(order, 1),
    )


def renormalize(sequence: PlanSequence) -> List[PlanItem]:
    """Reassign ``order = index + 1``. Idempotent."""
    return [
        item if item.order == index + 1 else item.model_copy(update={"order": index + 1})
        for index, item in enumerate(sequence)
    ]


def insert_into_stage(sequence: PlanSequence, stage_id: str, new_item: PlanItem) -> List[PlanItem]:
    """Insert ``new_item`` right after the last item of ``stage_id``, or at the end."""
    insert_at = len(sequence)
    for index in range(len(sequence) - 1, -1, -1):
        if sequence[index].stage_id == stage_id:
            insert_at = index + 1
            break
    items = list(sequence)
    items.insert(insert_at, new_item)
    return renormalize(items)


def remove_item(sequence: PlanSequence, item_id: str) -> List[PlanItem]:
    return renormalize([item for item in sequence if item.id != item_id])


def remove_stage(sequence: PlanSequence, stage_id: str) -> List[PlanItem]:
    return renormalize([item for item in sequence if item.stage_id != stage_id])


def move_item(sequence: PlanSequence, item_id: str, direction: Direction) -> List[PlanItem]:
    """Swap an item with its neighbour regardless of stage membership."""
    direction = _check_direction(direction)
    items = list(sequence)
    index = _index_of(items, item_id)
    neighbour = index - 1 if direction == "up" else index + 1
    if index < 0 or neighbour < 0 or neighbour >= len(items):
        return renormalize(items)
    items[index], items[neighbour] = items[neighbour], items[index]
    return renormalize(items)


def move_item_within_stage(sequence: PlanSequence, item_id: str, direction: Direction) -> List[PlanItem]:
    """Swap an item with its neighbour only when both belong to the same stage."""
    direction = _check_direction(direction)
    items = list(sequence)
    index = _index_of(items, item_id)
    neighbour = index - 1 if direction == "up" else index + 1
    if index < 0 or neighbour < 0 or neighbour >= len(items):
        return renormalize(items)
    if items[neighbour].stage_id != items[index].stage_id:
        return renormalize(items)
    items[index], items[neighbour] = items[neighbour], items[index]
    return renormalize(items)


def move_stage(sequence: PlanSequence, stage_id: str, direction: Direction) -> List[PlanItem]:
    """Swap a stage block with the adjacent block of another stage.

    Both blocks move as units and keep their internal order. A stage without
    items, or one already at the edge, leaves the sequence unchanged.
    """
    direction = _check_direction(direction)
    items = list(sequence)
    first = next((index for index, item in enumerate(items) if item.stage_id == stage_id), -1)
    if first < 0:
        return renormalize(items)

    begin, end = _stage_block(items, first)
    if direction == "up":
        if begin == 0:
            return renormalize(items)
        other_begin, _ = _stage_block(items, begin - 1)
        swapped = items[:other_begin] + items[begin:end] + items[other_begin:begin] + items[end:]
    else:
        if end >= len(items):
            return renormalize(items)
        _, other_end = _stage_block(items, end)
        swapped = items[:begin] + items[end:other_end] + items[begin:end] + items[other_end:]

    logger.debug("Moved stage %s %s", stage_id, direction)
    return renormalize(swapped)


def move_stage_id(stage_order: Sequence[str], stage_id: str, direction: Direction) -> List[str]:
    """Swap ``stage_id`` with its neighbour in a stage display order list."""
    direction = _check_direction(direction)
    order = list(stage_order)
    if stage_id not in order:
        return order
    index = order.index(stage_id)
    neighbour = index - 1 if direction == "up" else index + 1
    if neighbour < 0 or neighbour >= len(order):
        return order
    order[index], order[neighbour] = order[neighbour], order[index]
    return order


def align_to_stage_order(sequence: PlanSequence, stage_order: Sequence[str]) -> List[PlanItem]:
    """Regroup blocks to follow ``stage_order``.

    Stages missing from ``stage_order`` keep their first-encounter order after
    the listed ones.
    """
    grouped = group_by_stage(sequence)
    items: List[PlanItem] = []
    for stage_id in stage_order:
        items.extend(grouped.pop(stage_id, []))
    for stage_items in grouped.values():
        items.extend(stage_items)
    return renormalize(items)


__all__ = [
    "PlanSequence",
    "align_to_stage_order",
    "create_plan_item",
    "insert_into_stage",
    "move_item",
    "move_item_within_stage",
    "move_stage",
    "move_stage_id",
    "remove_item",
    "remove_stage",
    "renormalize",
]
