from __future__ import annotations

import os
from typing import Iterator, List

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("LESSON_DATABASE_URL", "sqlite://")

from lesson_planner.config import get_settings  # noqa: E402
from lesson_planner.db.session import create_schema, dispose_engine  # noqa: E402
from lesson_planner.telemetry import TelemetryEvent, clear_listeners, register_listener  # noqa: E402


@pytest.fixture
def database(monkeypatch) -> Iterator[None]:
    """Fresh in-memory schema per test."""
    monkeypatch.setenv("LESSON_DATABASE_URL", "sqlite://")
    get_settings.cache_clear()
    dispose_engine()
    create_schema()
    yield
    dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
def telemetry_events() -> Iterator[List[TelemetryEvent]]:
    events: List[TelemetryEvent] = []
    clear_listeners()
    register_listener(events.append)
    yield events
    clear_listeners()


@pytest.fixture
def client(database) -> Iterator[TestClient]:
    from lesson_planner.main import app

    with TestClient(app) as test_client:
        yield test_client
