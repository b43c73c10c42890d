from __future__ import annotations


def _create_stage(client, name: str = "Warm-up") -> dict:
    response = client.post("/api/stages", json={"name": name, "description": "Get moving"})
    assert response.status_code == 201
    return response.json()


def test_stage_crud(client) -> None:
    stage = _create_stage(client)
    assert stage["exercises"] == []

    response = client.put(f"/api/stages/{stage['id']}", json={"name": "Warm up"})
    assert response.status_code == 200
    assert response.json()["name"] == "Warm up"
    assert response.json()["description"] is None

    names = [entry["name"] for entry in client.get("/api/stages").json()]
    assert names == ["Warm up"]

    assert client.delete(f"/api/stages/{stage['id']}").status_code == 204
    assert client.get(f"/api/stages/{stage['id']}").status_code == 404
    assert client.delete(f"/api/stages/{stage['id']}").status_code == 404


def test_exercise_crud_under_stage(client) -> None:
    stage = _create_stage(client)
    response = client.post(f"/api/stages/{stage['id']}/exercises", json={"name": "Jog", "duration": 300})
    assert response.status_code == 201
    exercise = response.json()
    assert exercise["stage_id"] == stage["id"]

    listed = client.get(f"/api/stages/{stage['id']}/exercises").json()
    assert [entry["id"] for entry in listed] == [exercise["id"]]
    assert client.get(f"/api/stages/{stage['id']}").json()["exercises"][0]["name"] == "Jog"

    response = client.put(f"/api/exercises/{exercise['id']}", json={"name": "Jog", "duration": 420})
    assert response.status_code == 200
    assert response.json()["duration"] == 420

    assert client.delete(f"/api/exercises/{exercise['id']}").status_code == 204
    assert client.get(f"/api/exercises/{exercise['id']}").status_code == 404


def test_catalog_validation_and_missing_resources(client) -> None:
    stage = _create_stage(client)
    assert client.post("/api/stages", json={"name": ""}).status_code == 422
    assert client.post("/api/stages", json={"name": "   "}).status_code == 422
    assert client.post(f"/api/stages/{stage['id']}/exercises", json={"name": "Jog", "duration": -5}).status_code == 422
    assert client.post("/api/stages/missing/exercises", json={"name": "Jog", "duration": 60}).status_code == 404
    assert client.get("/api/stages/missing/exercises").status_code == 404
    assert client.put("/api/exercises/missing", json={"name": "Jog", "duration": 60}).status_code == 404
