"""
Tests for the read-only HTTP API and the event stream.
"""

import asyncio

from loom.exceptions import MissingReferenceError, loom_exception_handler
from loom.routes.events import stream_events


async def seed(tools):
    website = await tools.create_project(name="Website")
    api = await tools.create_project(name="API", status="planning")
    task = await tools.create_task(project_id=website["id"], title="Write copy", priority="high")
    await tools.create_task(project_id=api["id"], title="Add auth")
    await tools.create_task_note(task_id=task["id"], note="Started")
    problem = await tools.create_problem(title="Tone", task_id=task["id"], assignee="sam")
    goal = await tools.create_goal(title="Ship", goal_type="career")
    outcome = await tools.create_outcome(project_id=website["id"], title="Launch")
    await tools.link_goal_to_project(goal_id=goal["id"], project_id=api["id"])
    await tools.link_problem_to_project(problem_id=problem["id"], project_id=api["id"])
    return {
        "website": website,
        "api": api,
        "task": task,
        "problem": problem,
        "goal": goal,
        "outcome": outcome,
    }


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestProjectsApi:
    async def test_list_and_filter(self, client, tools):
        data = await seed(tools)

        response = await client.get("/api/projects")
        assert response.status_code == 200
        assert {p["name"] for p in response.json()} == {"Website", "API"}

        response = await client.get("/api/projects", params={"status": "planning"})
        assert [p["id"] for p in response.json()] == [data["api"]["id"]]

    async def test_unknown_status_is_422(self, client):
        response = await client.get("/api/projects", params={"status": "paused"})

        assert response.status_code == 422

    async def test_get_one(self, client, tools):
        data = await seed(tools)

        response = await client.get(f"/api/projects/{data['website']['id']}")

        assert response.status_code == 200
        assert response.json() == data["website"]

    async def test_missing_project_error_format(self, client):
        response = await client.get("/api/projects/999")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["message"] == "Project with ID 999 not found"

    async def test_linked_goals_and_problems(self, client, tools):
        data = await seed(tools)
        api_id = data["api"]["id"]

        goals = await client.get(f"/api/projects/{api_id}/goals")
        problems = await client.get(f"/api/projects/{api_id}/problems")

        assert [g["id"] for g in goals.json()] == [data["goal"]["id"]]
        assert [p["id"] for p in problems.json()] == [data["problem"]["id"]]


class TestTasksApi:
    async def test_filter_by_project_and_priority(self, client, tools):
        data = await seed(tools)

        response = await client.get(
            "/api/tasks", params={"project_id": data["website"]["id"], "priority": "high"}
        )

        assert [t["id"] for t in response.json()] == [data["task"]["id"]]

    async def test_notes(self, client, tools):
        data = await seed(tools)

        response = await client.get(f"/api/tasks/{data['task']['id']}/notes")

        assert [n["note"] for n in response.json()] == ["Started"]

    async def test_notes_of_missing_task_is_404(self, client):
        response = await client.get("/api/tasks/999/notes")

        assert response.status_code == 404


class TestOtherEntitiesApi:
    async def test_problem_endpoints(self, client, tools):
        data = await seed(tools)
        problem_id = data["problem"]["id"]

        listed = await client.get("/api/problems", params={"assignee": "sam"})
        one = await client.get(f"/api/problems/{problem_id}")
        linked = await client.get(f"/api/problems/{problem_id}/projects")

        assert [p["id"] for p in listed.json()] == [problem_id]
        assert one.json()["project_id"] == data["website"]["id"]
        assert [p["id"] for p in linked.json()] == [data["api"]["id"]]

    async def test_goal_endpoints(self, client, tools):
        data = await seed(tools)
        goal_id = data["goal"]["id"]

        listed = await client.get("/api/goals", params={"goal_type": "career"})
        linked = await client.get(f"/api/goals/{goal_id}/projects")

        assert [g["id"] for g in listed.json()] == [goal_id]
        assert [p["id"] for p in linked.json()] == [data["api"]["id"]]

    async def test_outcome_endpoints(self, client, tools):
        data = await seed(tools)

        listed = await client.get("/api/outcomes", params={"project_id": data["website"]["id"]})
        missing = await client.get("/api/outcomes/999")

        assert [o["id"] for o in listed.json()] == [data["outcome"]["id"]]
        assert missing.status_code == 404

    async def test_summary(self, client, tools):
        data = await seed(tools)

        response = await client.get("/api/summary")

        body = response.json()
        assert [p["id"] for p in body["projects"]] == [data["website"]["id"]]
        assert len(body["tasks"]) == 2
        assert [o["id"] for o in body["outcomes"]] == [data["outcome"]["id"]]


class TestEventStream:
    async def test_stream_relays_published_events(self, client, hub):
        async def publish_then_close():
            while hub.subscriber_count == 0:
                await asyncio.sleep(0.01)
            hub.publish("task_created", {"id": 1, "title": "Write copy"})
            await asyncio.sleep(0.1)
            hub.close_all()

        closer = asyncio.create_task(publish_then_close())
        response = await asyncio.wait_for(client.get("/events"), timeout=5)
        await closer

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        body = response.text
        assert body.startswith("event: connected\n")
        assert 'event: task_created\ndata: {"id": 1, "title": "Write copy"}\n\n' in body
        assert hub.subscriber_count == 0

    async def test_response_dropped_before_streaming_leaves_no_subscriber(self, hub):
        response = await stream_events(request=None, hub=hub)

        await response.body_iterator.aclose()

        assert hub.subscriber_count == 0
        hub.publish("task_created", {"id": 1})
        assert hub.subscriber_count == 0


class TestErrorFormat:
    async def test_reference_error_details(self):
        response = await loom_exception_handler(None, MissingReferenceError("project_id", "Project", 7))

        assert response.status_code == 404
        assert b'"error":"reference_error"' in response.body
        assert b'"loc":["project_id"]' in response.body
