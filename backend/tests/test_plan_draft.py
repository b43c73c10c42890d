from __future__ import annotations

import pytest

from lesson_planner.errors import BudgetExceededError
from lesson_planner.plan_draft import PlanDraft
from lesson_planner.plan_models import Exercise, LessonPlan, LessonStage

WARMUP = LessonStage(
    id="warmup",
    name="Warm-up",
    exercises=[Exercise(id="jog", name="Jog", duration=300), Exercise(id="stretch", name="Stretch", duration=400)],
)
MAIN = LessonStage(id="main", name="Main part", exercises=[Exercise(id="drill", name="Drill", duration=1800)])
COOLDOWN = LessonStage(id="cooldown", name="Cool-down", exercises=[Exercise(id="walk", name="Walk", duration=600)])


def _draft() -> PlanDraft:
    return (
        PlanDraft(title="Tuesday")
        .add_exercise(WARMUP, WARMUP.exercises[0])
        .add_exercise(MAIN, MAIN.exercises[0])
        .add_exercise(WARMUP, WARMUP.exercises[1])
    )


def test_add_exercise_keeps_stage_blocks_contiguous() -> None:
    draft = _draft()
    assert [item.exercise_id for item in draft.items] == ["jog", "stretch", "drill"]
    assert [item.order for item in draft.items] == [1, 2, 3]
    assert draft.declared_stage_ids == ["warmup", "main"]
    assert draft.total_duration == 2500


def test_draft_is_immutable() -> None:
    empty = PlanDraft()
    populated = empty.add_exercise(WARMUP, WARMUP.exercises[0])
    assert empty.items == []
    assert len(populated.items) == 1


def test_add_exercise_refuses_over_budget() -> None:
    draft = PlanDraft(ceiling=1000).add_exercise(WARMUP, WARMUP.exercises[0])
    with pytest.raises(BudgetExceededError) as excinfo:
        draft.add_exercise(MAIN, MAIN.exercises[0])
    assert excinfo.value.current_total == 300
    assert excinfo.value.ceiling == 1000

    forced = draft.add_exercise(MAIN, MAIN.exercises[0], enforce_budget=False)
    assert forced.schedule().budget.is_over


def test_add_exercise_to_declared_empty_stage_respects_display_order() -> None:
    draft = _draft().add_stage("cooldown", position="top")
    assert draft.stage_order() == ["cooldown", "warmup", "main"]

    draft = draft.add_exercise(COOLDOWN, COOLDOWN.exercises[0])
    assert [item.exercise_id for item in draft.items] == ["walk", "jog", "stretch", "drill"]
    schedule = draft.schedule()
    assert schedule.item_start_times[draft.items[0].id] == "14:00:00"
    assert schedule.stage_start_times["warmup"] == "14:10:00"


def test_remove_item_keeps_empty_stage_declared() -> None:
    draft = _draft()
    drill = next(item for item in draft.items if item.exercise_id == "drill")
    draft = draft.remove_item(drill.id)
    assert "main" in draft.stage_order()
    assert draft.schedule().stage_start_times["main"] == "14:11:40"


def test_remove_stage_drops_items_and_declaration() -> None:
    draft = _draft().remove_stage("warmup")
    assert [item.exercise_id for item in draft.items] == ["drill"]
    assert draft.stage_order() == ["main"]


def test_move_stage_past_an_empty_stage_stays_consistent() -> None:
    draft = _draft().add_stage("cooldown")
    assert draft.stage_order() == ["warmup", "main", "cooldown"]

    draft = draft.move_stage("main", "down")
    assert draft.stage_order() == ["warmup", "cooldown", "main"]
    draft = draft.move_stage("warmup", "down")
    assert draft.stage_order() == ["cooldown", "warmup", "main"]
    draft = draft.move_stage("main", "up")
    assert draft.stage_order() == ["cooldown", "main", "warmup"]
    assert [item.exercise_id for item in draft.items] == ["drill", "jog", "stretch"]
    assert draft.schedule().stage_start_times["warmup"] == "14:30:00"


def test_move_item_within_stage_through_draft() -> None:
    draft = _draft()
    stretch = draft.items[1]
    moved = draft.move_item_within_stage(stretch.id, "up")
    assert [item.exercise_id for item in moved.items] == ["stretch", "jog", "drill"]
    assert moved.move_item_within_stage(stretch.id, "up").items == moved.items


def test_with_start_time_validates_and_normalises() -> None:
    draft = PlanDraft().with_start_time("8:30")
    assert draft.lesson_start_time == "08:30:00"
    with pytest.raises(ValueError):
        draft.with_start_time("25:00")


def test_plan_request_and_round_trip_through_saved_plan() -> None:
    draft = _draft()
    request = draft.to_plan_request()
    assert request.title == "Tuesday"
    assert [(item.exercise_id, item.order) for item in request.items] == [("jog", 1), ("stretch", 2), ("drill", 3)]

    saved = LessonPlan(id="plan-1", title="Tuesday", items=list(reversed(draft.items)), total_duration=2500)
    reopened = PlanDraft.from_plan(saved, lesson_start_time="09:00", title="Tuesday (copy 1)")
    assert reopened.title == "Tuesday (copy 1)"
    assert reopened.lesson_start_time == "09:00:00"
    assert [item.order for item in reopened.items] == [1, 2, 3]
    assert reopened.declared_stage_ids == ["main", "warmup"]


def test_plan_request_follows_declared_stage_order() -> None:
    draft = _draft()
    draft = PlanDraft(items=draft.items, declared_stage_ids=["main", "warmup"])
    request = draft.to_plan_request()
    assert [(item.exercise_id, item.order) for item in request.items] == [("drill", 1), ("jog", 2), ("stretch", 3)]
