import os

import pytest
from fastapi.testclient import TestClient

# Default to the memory backend so importing the app never touches the filesystem
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from src.api.db import SQLiteRepository  # noqa: E402
from src.api.main import app  # noqa: E402
from src.api.repositories import InMemoryRepository, get_repository  # noqa: E402

ALLOWED_ORIGIN = "http://localhost:5173"


@pytest.fixture(params=["memory", "sqlite"])
def repository(request, tmp_path):
    """A fresh, empty store for each test, once per backend."""
    if request.param == "sqlite":
        return SQLiteRepository(str(tmp_path / "events.db"))
    return InMemoryRepository()


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_repository] = lambda: repository
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def event_payload(
    title="Meeting",
    description="Team",
    start="2025-07-10T09:00:00",
    end="2025-07-10T10:00:00",
    **extra,
):
    payload = {
        "title": title,
        "description": description,
        "startDateTime": start,
        "endDateTime": end,
    }
    payload.update(extra)
    return payload


@pytest.fixture
def seeded(client):
    """Store E1 (open meeting) and E2 (completed deadline); return their JSON bodies."""
    e1 = client.post(
        "/events",
        json=event_payload(title="Meeting", description="Team Meeting", isCompleted=False),
    ).json()
    e2 = client.post(
        "/events",
        json=event_payload(
            title="Project Deadline",
            description="Final submission",
            start="2025-07-15T17:00:00",
            end="2025-07-15T23:59:00",
            isCompleted=True,
        ),
    ).json()
    return e1, e2
