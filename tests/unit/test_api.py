"""Tests for the Himma dashboard API (FastAPI REST)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from himma.api.app import create_app
from himma.config import reset_config
from himma.engine.alert_emitter import silent
from himma.engine.directory import OrgDirectory
from himma.engine.scheduler import ManualScheduler
from himma.models import Project, Task, TaskStatus


START = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)

ADMIN = {"id": "a1", "name": "Admin", "role": "Admin"}
EMPLOYEE = {
    "id": "e1", "name": "Worker", "role": "Employee",
    "department_id": "d1", "project_id": "p2",
}


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _clean_config():
    """Reset the global config singleton before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sched() -> ManualScheduler:
    return ManualScheduler(START)


@pytest.fixture
def directory() -> OrgDirectory:
    return OrgDirectory(
        projects=[Project(id="p1", name="Metro"), Project(id="p2", name="Harbour")],
        tasks=[
            Task(id="t1", project_id="p1", department_id="d1", employee_id="e9",
                 title="Survey", deadline=START + timedelta(hours=5)),
            Task(id="t2", project_id="p2", department_id="d1", employee_id="e1",
                 title="Dredging", deadline=START + timedelta(days=3)),
            Task(id="t3", project_id="p2", department_id="d2", employee_id="e2",
                 title="Permits", deadline=START + timedelta(days=3)),
        ],
    )


@pytest.fixture
def app(directory, sched):
    """Create the FastAPI app with injected test dependencies."""
    return create_app(directory=directory, scheduler=sched, sound=silent)


@pytest_asyncio.fixture
async def client(app):
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _login(client: AsyncClient, user: dict) -> dict:
    resp = await client.post("/api/session/login", json=user)
    assert resp.status_code == 200
    return resp.json()


# ── Health & Session ──────────────────────────────────────────────────────


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_check(self, client: AsyncClient):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_info_without_session(self, client: AsyncClient):
        data = (await client.get("/api/info")).json()
        assert data["version"] == "0.1.0"
        assert data["session_active"] is False


class TestSession:
    @pytest.mark.asyncio
    async def test_login_admin(self, client: AsyncClient):
        data = await _login(client, ADMIN)
        assert data["active"] is True
        assert data["user"]["role"] == "Admin"
        assert data["user"]["role_label"] == "General manager"
        assert data["active_project_id"] == "p1"

    @pytest.mark.asyncio
    async def test_login_rejects_unknown_role(self, client: AsyncClient):
        resp = await client.post(
            "/api/session/login", json={"id": "x", "name": "X", "role": "Root"}
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_requires_session(self, client: AsyncClient):
        for path in ("/api/projects", "/api/tasks", "/api/notifications", "/api/toasts"):
            resp = await client.get(path)
            assert resp.status_code == 401, path

    @pytest.mark.asyncio
    async def test_logout_stops_timers(self, client: AsyncClient, sched: ManualScheduler):
        await _login(client, ADMIN)
        resp = await client.post("/api/session/logout")
        assert resp.status_code == 204
        assert sched.pending == 0

        current = (await client.get("/api/session")).json()
        assert current == {"active": False, "user": None, "active_project_id": None}


# ── Projects & Tasks ──────────────────────────────────────────────────────


class TestVisibility:
    @pytest.mark.asyncio
    async def test_admin_selects_project(self, client: AsyncClient):
        await _login(client, ADMIN)
        projects = (await client.get("/api/projects")).json()
        assert [p["id"] for p in projects] == ["p1", "p2"]

        resp = await client.put("/api/projects/active", json={"project_id": "p2"})
        assert resp.json()["id"] == "p2"
        tasks = (await client.get("/api/tasks")).json()
        assert [t["id"] for t in tasks] == ["t2", "t3"]

    @pytest.mark.asyncio
    async def test_employee_scoped(self, client: AsyncClient):
        await _login(client, EMPLOYEE)
        projects = (await client.get("/api/projects")).json()
        assert [p["id"] for p in projects] == ["p2"]

        resp = await client.put("/api/projects/active", json={"project_id": "p1"})
        assert resp.json()["id"] == "p2"

        tasks = (await client.get("/api/tasks")).json()
        assert [t["id"] for t in tasks] == ["t2"]
        assert tasks[0]["status_label"] == "Pending"


class TestTasks:
    @pytest.mark.asyncio
    async def test_status_update_notifies_once(self, client: AsyncClient):
        await _login(client, ADMIN)
        body = {"status": "COMPLETED"}

        first = (await client.put("/api/tasks/t1/status", json=body)).json()
        assert first["notified"] is True
        assert first["task"]["status"] == "COMPLETED"

        second = (await client.put("/api/tasks/t1/status", json=body)).json()
        assert second["notified"] is False

        notifs = (await client.get("/api/notifications")).json()
        assert len(notifs) == 1
        assert notifs[0]["type"] == "status"

    @pytest.mark.asyncio
    async def test_unknown_task_is_not_an_error(self, client: AsyncClient):
        await _login(client, ADMIN)
        resp = await client.put("/api/tasks/nope/status", json={"status": "OVERDUE"})
        assert resp.status_code == 200
        assert resp.json() == {"task_id": "nope", "notified": False, "task": None}

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, client: AsyncClient):
        await _login(client, ADMIN)
        resp = await client.put("/api/tasks/t1/status", json={"status": "DONE"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_task(self, client: AsyncClient, directory: OrgDirectory):
        await _login(client, ADMIN)
        resp = await client.post(
            "/api/tasks",
            json={
                "title": "Inspect tunnel",
                "department_id": "d1",
                "employee_id": "e3",
                "deadline": "2025-06-10",
            },
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["project_id"] == "p1"
        assert data["deadline"] == "2025-06-10"
        assert directory.get_task(data["id"]) is not None

        notifs = (await client.get("/api/notifications")).json()
        assert notifs[0]["type"] == "assignment"

    @pytest.mark.asyncio
    async def test_create_task_bad_deadline(self, client: AsyncClient):
        await _login(client, ADMIN)
        resp = await client.post(
            "/api/tasks",
            json={"title": "X", "department_id": "d1", "employee_id": "e1", "deadline": "soon"},
        )
        assert resp.status_code == 422


# ── Notifications & Toasts ────────────────────────────────────────────────


class TestNotifications:
    @pytest.mark.asyncio
    async def test_count_and_read_all(self, client: AsyncClient):
        await _login(client, ADMIN)
        await client.put("/api/tasks/t1/status", json={"status": "IN_PROGRESS"})
        await client.put("/api/tasks/t1/status", json={"status": "COMPLETED"})

        count = (await client.get("/api/notifications/count")).json()
        assert count == {"count": 2, "by_type": {"status": 2}}

        resp = await client.post("/api/notifications/read-all")
        assert resp.json() == {"marked": 2}
        count = (await client.get("/api/notifications/count")).json()
        assert count["count"] == 0

        await client.put("/api/tasks/t2/status", json={"status": "OVERDUE"})
        count = (await client.get("/api/notifications/count")).json()
        assert count["count"] == 1

    @pytest.mark.asyncio
    async def test_mark_single_read(self, client: AsyncClient):
        await _login(client, ADMIN)
        await client.put("/api/tasks/t1/status", json={"status": "COMPLETED"})
        notif_id = (await client.get("/api/notifications")).json()[0]["id"]

        resp = await client.post(f"/api/notifications/{notif_id}/read")
        assert resp.status_code == 204
        resp = await client.post("/api/notifications/missing/read")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_grouped(self, client: AsyncClient, sched: ManualScheduler):
        await _login(client, ADMIN)
        await client.put("/api/tasks/t1/status", json={"status": "COMPLETED"})
        sched.advance(15)  # simulated assignment
        sched.advance(105)  # first deadline scan; t1 is due in under 5h

        groups = (await client.get("/api/notifications/grouped")).json()
        assert [g["type"] for g in groups] == ["assignment", "deadline", "status"]
        assert groups[1]["label"] == "Deadline alerts"
        assert "1 task due" in groups[1]["items"][0]["message"]

    @pytest.mark.asyncio
    async def test_toast_dismiss_keeps_notification(self, client: AsyncClient):
        await _login(client, ADMIN)
        await client.put("/api/tasks/t1/status", json={"status": "COMPLETED"})
        await client.put("/api/tasks/t2/status", json={"status": "COMPLETED"})

        toasts = (await client.get("/api/toasts")).json()
        assert len(toasts) == 2
        resp = await client.delete(f"/api/toasts/{toasts[0]['id']}")
        assert resp.status_code == 204

        remaining = (await client.get("/api/toasts")).json()
        assert [t["id"] for t in remaining] == [toasts[1]["id"]]
        notifs = (await client.get("/api/notifications")).json()
        assert len(notifs) == 2
        assert all(not n["read"] for n in notifs)

    @pytest.mark.asyncio
    async def test_toasts_expire(self, client: AsyncClient, sched: ManualScheduler):
        await _login(client, ADMIN)
        await client.put("/api/tasks/t1/status", json={"status": "COMPLETED"})
        sched.advance(5)
        assert (await client.get("/api/toasts")).json() == []

    @pytest.mark.asyncio
    async def test_dismiss_unknown_toast(self, client: AsyncClient):
        await _login(client, ADMIN)
        resp = await client.delete("/api/toasts/nope")
        assert resp.status_code == 404
