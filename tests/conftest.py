"""
Shared fixtures.

Every test gets its own in-memory SQLite database wired into the app
through dependency overrides, so nothing touches PostgreSQL.

Run:  pytest -v
"""

import os

os.environ.setdefault("ENV_MODE", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy.pool import StaticPool

from workflow import database
from workflow.main import app


@pytest.fixture
async def db_manager():
    manager = database.DatabaseManager(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await manager.create_all()
    yield manager
    await manager.dispose()


@pytest.fixture
async def db(db_manager):
    async with db_manager.session_factory() as session:
        yield session


@pytest.fixture
async def client(db_manager):
    app.dependency_overrides[database.get_db] = db_manager.get_db
    app.dependency_overrides[database.get_session_factory] = lambda: db_manager.session_factory
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


def future_iso(days: int = 10) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


@pytest.fixture
def project_payload():
    return {
        "title": "Launch",
        "description": "Public launch of the new site",
        "team": [{"name": "Ada", "avatar": "https://example.com/ada.png"}, {"name": "Linus"}],
    }


@pytest.fixture
def make_project(client, project_payload):
    async def _make(**overrides):
        payload = {**project_payload, **overrides}
        response = await client.post("/api/v1/projects", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _make


@pytest.fixture
def make_task(client):
    async def _make(project_id, **overrides):
        payload = {
            "title": "Write copy",
            "assignee": {"name": "Ada"},
            "projectId": project_id,
            **overrides,
        }
        response = await client.post("/api/v1/tasks", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _make


async def graphql(client, query, variables=None):
    response = await client.post("/graphql", json={"query": query, "variables": variables or {}})
    assert response.status_code == 200, response.text
    return response.json()
