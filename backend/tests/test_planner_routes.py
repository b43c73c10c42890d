from __future__ import annotations

from typing import Tuple


def _catalog(client) -> Tuple[dict, dict]:
    warmup = client.post("/api/stages", json={"name": "Warm-up"}).json()
    main = client.post("/api/stages", json={"name": "Main part"}).json()
    client.post(f"/api/stages/{warmup['id']}/exercises", json={"name": "Jog", "duration": 600})
    client.post(f"/api/stages/{main['id']}/exercises", json={"name": "Game", "duration": 4500})
    return client.get(f"/api/stages/{warmup['id']}").json(), client.get(f"/api/stages/{main['id']}").json()


def _apply(client, draft: dict, operation: str, **fields) -> dict:
    response = client.post("/api/planner/operations", json={"draft": draft, "operation": operation, **fields})
    assert response.status_code == 200, response.text
    return response.json()


def test_build_a_plan_step_by_step(client) -> None:
    warmup, main = _catalog(client)
    result = _apply(client, {"title": "Tuesday"}, "add_stage", stage_id=main["id"])
    result = _apply(
        client,
        result["draft"],
        "add_exercise",
        stage_id=warmup["id"],
        exercise_id=warmup["exercises"][0]["id"],
    )
    result = _apply(
        client,
        result["draft"],
        "add_exercise",
        stage_id=main["id"],
        exercise_id=main["exercises"][0]["id"],
    )
    draft = result["draft"]
    assert [item["stage_id"] for item in draft["items"]] == [main["id"], warmup["id"]]
    assert result["schedule"]["stage_start_times"][warmup["id"]] == "15:15:00"

    result = _apply(client, draft, "move_stage", stage_id=warmup["id"], direction="up")
    assert result["schedule"]["stage_order"] == [warmup["id"], main["id"]]
    assert result["schedule"]["stage_start_times"][main["id"]] == "14:10:00"
    assert result["schedule"]["budget"]["remaining"] == 300
    assert result["schedule"]["budget"]["is_near_limit"] is True

    result = _apply(client, result["draft"], "set_start_time", start_time="08:00")
    assert result["schedule"]["item_start_times"][result["draft"]["items"][1]["id"]] == "08:10:00"

    response = client.post("/api/planner/save", json=result["draft"])
    assert response.status_code == 201
    assert response.json()["total_duration"] == 5100


def test_budget_refusal_is_a_conflict(client, telemetry_events) -> None:
    warmup, main = _catalog(client)
    draft = _apply(
        client, {}, "add_exercise", stage_id=main["id"], exercise_id=main["exercises"][0]["id"]
    )["draft"]
    draft = _apply(
        client, draft, "add_exercise", stage_id=warmup["id"], exercise_id=warmup["exercises"][0]["id"]
    )["draft"]

    payload = {
        "draft": draft,
        "operation": "add_exercise",
        "stage_id": warmup["id"],
        "exercise_id": warmup["exercises"][0]["id"],
    }
    response = client.post("/api/planner/operations", json=payload)
    assert response.status_code == 409
    assert telemetry_events[-1].name == "budget_refused"
    assert telemetry_events[-1].payload["current_total"] == 5100

    forced = client.post("/api/planner/operations", json={**payload, "enforce_budget": False}).json()
    assert forced["schedule"]["budget"]["is_over"] is True
    assert client.post("/api/planner/save", json={**forced["draft"], "title": "Too long"}).status_code == 422


def test_operation_errors(client) -> None:
    warmup, _ = _catalog(client)
    response = client.post("/api/planner/operations", json={"operation": "move_stage", "stage_id": "x"})
    assert response.status_code == 422

    response = client.post(
        "/api/planner/operations",
        json={"operation": "add_exercise", "stage_id": "missing", "exercise_id": "missing"},
    )
    assert response.status_code == 404

    response = client.post(
        "/api/planner/operations",
        json={"operation": "add_exercise", "stage_id": warmup["id"], "exercise_id": "missing"},
    )
    assert response.status_code == 404

    response = client.post("/api/planner/operations", json={"operation": "set_start_time", "start_time": "7pm"})
    assert response.status_code == 422


def test_schedule_projection_endpoint(client) -> None:
    item = {
        "id": "i1",
        "stage_id": "main",
        "stage_name": "Main",
        "exercise_id": "drill",
        "exercise_name": "Drill",
        "duration": 900,
        "order": 1,
    }
    draft = {"items": [item], "declared_stage_ids": ["warmup"], "lesson_start_time": "23:50:00"}
    schedule = client.post("/api/planner/schedule", json=draft).json()["schedule"]
    assert schedule["stage_order"] == ["warmup", "main"]
    assert schedule["stage_start_times"] == {"warmup": "23:50:00", "main": "23:50:00"}
    assert schedule["total_duration"] == 900


def test_schedule_rejects_invalid_start_time(client) -> None:
    response = client.post("/api/planner/schedule", json={"lesson_start_time": "25:00"})
    assert response.status_code == 422


def _draft_item(item_id: str, stage_id: str, order: int) -> dict:
    return {
        "id": item_id,
        "stage_id": stage_id,
        "stage_name": stage_id,
        "exercise_id": f"ex-{item_id}",
        "exercise_name": item_id,
        "duration": 300,
        "order": order,
    }


def test_saved_draft_matches_its_schedule(client) -> None:
    draft = {
        "title": "Stage order first",
        "items": [_draft_item("a1", "A", 1), _draft_item("b1", "B", 2)],
        "declared_stage_ids": ["B", "A"],
    }
    schedule = client.post("/api/planner/schedule", json=draft).json()["schedule"]
    assert schedule["item_start_times"] == {"b1": "14:00:00", "a1": "14:05:00"}

    response = client.post("/api/planner/save", json=draft)
    assert response.status_code == 201
    saved = [(item["exercise_id"], item["order"]) for item in response.json()["items"]]
    assert saved == [("ex-b1", 1), ("ex-a1", 2)]


def test_schedule_start_time_is_zero_padded(client) -> None:
    draft = {"items": [_draft_item("a1", "A", 1)], "lesson_start_time": "9:05"}
    schedule = client.post("/api/planner/schedule", json=draft).json()["schedule"]
    assert schedule["stage_start_times"] == {"A": "09:05:00"}
    assert schedule["item_start_times"] == {"a1": "09:05:00"}
