"""Tests for the FastAPI routes."""

import pytest
from fastapi.testclient import TestClient

from checkmate.interfaces.api import create_app


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


def create(client, title, points=None, **extra):
    response = client.post("/api/tasks", json={"title": title, "tag_points": points or {"work": 3}, **extra})
    assert response.status_code == 201, response.text
    return response.json()


class TestTasks:
    def test_create_and_get(self, client):
        task = create(client, "Report", {"work": 5})

        response = client.get(f"/api/tasks/{task['id']}")

        assert response.status_code == 200
        assert response.json()["tag_points"] == {"work": 5}

    def test_validation_error(self, client):
        response = client.post("/api/tasks", json={"title": "Bad", "tag_points": {"work": 4}})

        assert response.status_code == 422
        assert response.json()["detail"]["kind"] == "validation"

    def test_not_found(self, client):
        response = client.get("/api/tasks/task_missing")

        assert response.status_code == 404
        assert response.json()["detail"]["kind"] == "not_found"

    def test_complete_twice_conflicts(self, client):
        task = create(client, "Once")

        assert client.post(f"/api/tasks/{task['id']}/complete").json()["status"] == "completed"
        assert client.post(f"/api/tasks/{task['id']}/complete").status_code == 409

    def test_cancel_justification_is_protected(self, client):
        task = create(client, "Drop")
        canceled = client.post(f"/api/tasks/{task['id']}/cancel", json={"justification": "Obsolete"}).json()
        comment_id = canceled["comments"][0]["id"]

        response = client.delete(f"/api/tasks/{task['id']}/comments/{comment_id}")

        assert response.status_code == 403

    def test_list_by_location(self, client, services):
        sprint = services.sprints.ensure_current_sprint()
        create(client, "Planned", sprint_id=sprint.id)
        create(client, "Someday")

        titles = [t["title"] for t in client.get("/api/tasks", params={"location": sprint.id}).json()]
        assert titles == ["Planned"]

        titles = [t["title"] for t in client.get("/api/tasks", params={"location": "backlog"}).json()]
        assert titles == ["Someday"]

    @pytest.mark.parametrize("location", ["", "   "])
    def test_blank_location_rejected(self, client, location):
        response = client.get("/api/tasks", params={"location": location})

        assert response.status_code == 422
        assert response.json()["detail"]["kind"] == "validation"

    def test_sessions(self, client):
        task = create(client, "Deep work")

        started = client.post(f"/api/tasks/{task['id']}/sessions", json={"minutes": 25})
        assert started.status_code == 201

        ended = client.post(f"/api/tasks/{task['id']}/sessions/end", json={"focus_level": "focused"})
        assert ended.json()["sessions"][0]["status"] == "completed"


class TestFocus:
    def test_focus_queue(self, client):
        first = create(client, "First")
        second = create(client, "Second")
        client.post(f"/api/tasks/{first['id']}/skip", json={})

        body = client.get("/api/focus", params={"location": "backlog"}).json()

        assert body["focus_task"]["id"] == second["id"]
        assert [t["id"] for t in body["up_next"]] == [first["id"]]
        assert body["hidden_count"] == 0

    def test_skip_for_day_hides(self, client):
        task = create(client, "Hidden")
        client.post(f"/api/tasks/{task['id']}/skip", json={"for_day": True, "justification": "Tomorrow"})

        body = client.get("/api/focus").json()

        assert body["focus_task"] is None
        assert body["hidden_count"] == 1

    def test_active_routine(self, client, services):
        assert client.get("/api/routines/active").json() == {"routine": None}

        services.routines.create_routine("Always", 5, activation_expression="True")
        assert client.get("/api/routines/active").json()["routine"]["name"] == "Always"


class TestSprintHealth:
    def test_no_current_sprint(self, client):
        assert client.get("/api/sprints/current/health").status_code == 404

    def test_current_sprint_health(self, client, services):
        sprint = services.sprints.ensure_current_sprint()
        work = services.tags.create_tag("Work", 20).value
        create(client, "Over", {work.id: 21}, sprint_id=sprint.id)

        body = client.get("/api/sprints/current/health").json()

        assert body["overall"] == "off_track"
        assert body["by_tag"][0]["scheduled"] == 21
        assert body["days_remaining"] == 4

    def test_tags_include_untagged(self, client):
        assert "untagged" in [t["id"] for t in client.get("/api/tags").json()]
