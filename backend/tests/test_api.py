"""
HTTP tests for the task and session routes.
"""

from conftest import make_task


class TestHealth:

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}


class TestTaskRoutes:

    async def test_history_of_unknown_task_is_404(self, client):
        response = await client.get("/tasks/missing/history")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    async def test_progress_of_unknown_task_is_404(self, client, fake_llm):
        response = await client.get("/tasks/missing/progress")
        assert response.status_code == 404
        assert fake_llm.calls == []

    async def test_history_and_progress(self, client, add_tasks, fake_llm):
        root = make_task("Build recorder")
        child = make_task("Tab capture", parent=root, status="Completed")
        await add_tasks(root, child)
        fake_llm.text_response = "Halfway there."

        history = await client.get(f"/tasks/{root.id}/history")
        assert history.status_code == 200
        assert [row["id"] for row in history.json()] == [root.id, child.id]

        progress = await client.get(f"/tasks/{root.id}/progress")
        assert progress.status_code == 200
        body = progress.json()
        assert body["aiAnalysis"] == "Halfway there."
        assert body["progressMetrics"]["taskId"] == root.id
        assert body["progressMetrics"]["progressPercent"] == 50
        assert body["progressMetrics"]["subtasksTotal"] == 2

    async def test_list_root_tasks(self, client, add_tasks):
        root = make_task("Build recorder")
        await add_tasks(root, make_task("Tab capture", parent=root))

        response = await client.get("/tasks/")
        assert response.status_code == 200
        assert [row["title"] for row in response.json()] == ["Build recorder"]


class TestSessionRoutes:

    async def test_continuity_report(self, client, fake_llm):
        first = await client.post(
            "/sessions/A/continuity",
            json={"tasks": [{"title": "Build recorder"}, {"title": "Setup DB", "description": None}]},
        )
        assert first.status_code == 200
        assert first.json() == {"previousTasks": [], "blockers": [], "aiAnalysis": ""}

        fake_llm.json_responses.append(
            {"relationship": "subtask", "parent_task_title": "Build recorder"}
        )
        fake_llm.text_response = "Recorder work continues."

        second = await client.post(
            "/sessions/B/continuity",
            json={"tasks": [{"title": "Add multi-user support", "description": "extends recorder"}]},
        )
        assert second.status_code == 200
        body = second.json()
        assert [t["taskTitle"] for t in body["previousTasks"]] == ["Build recorder"]
        assert body["previousTasks"][0]["subtasksTotal"] == 2
        assert body["previousTasks"][0]["estimatedDaysRemaining"] == "N/A"
        assert body["aiAnalysis"] == "Recorder work continues."

    async def test_blank_title_is_rejected(self, client):
        response = await client.post("/sessions/A/continuity", json={"tasks": [{"title": "  "}]})
        assert response.status_code == 422

    async def test_upstream_failure_is_502(self, client, add_tasks, fake_llm):
        await add_tasks(make_task("Build recorder"))
        fake_llm.json_responses.append("not json")

        response = await client.post("/sessions/B/continuity", json={"tasks": [{"title": "Mic capture"}]})

        assert response.status_code == 502
        assert response.json()["error"] == "malformed_upstream_payload"
