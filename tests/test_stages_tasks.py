# tests/test_stages_tasks.py

"""
Tests for stage management, tasks, assets and discussions.
"""

from fastapi.testclient import TestClient

from core.config import settings


BASE = "/projects/5/stages"
FIRST = f"{BASE}/client-onboarding"


def _create_task(client: TestClient, stage_url: str = FIRST, **body):
    payload = {"title": "Survey site", **body}
    response = client.post(f"{stage_url}/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


# ============================================================
# Stages
# ============================================================
def test_add_stage(client: TestClient):
    response = client.post(BASE)
    assert response.status_code == 201
    stage = response.json()
    assert stage["name"] == "New Phase"
    assert stage["status"] == "pending"

    stages = client.get(BASE).json()["data"]
    assert stages[-1]["id"] == stage["id"]


def test_add_stage_admin_only(client: TestClient, as_role):
    as_role("Principal Architect")
    assert client.post(BASE).status_code == 403


def test_delete_stage_needs_confirmation(client: TestClient):
    assert client.delete(f"{BASE}/maintenance").status_code == 400

    response = client.delete(f"{BASE}/maintenance", params={"confirm": "true"})
    assert response.status_code == 200
    assert len(client.get(BASE).json()["data"]) == 16


def test_delete_current_stage_moves_pointer(client: TestClient):
    response = client.delete(FIRST, params={"confirm": "true"})
    assert response.status_code == 200
    assert response.json()["currentStageId"] == "ideation-concept"


def test_cannot_delete_last_stage(client: TestClient):
    stage_ids = [s["id"] for s in client.get(BASE).json()["data"]]
    for stage_id in stage_ids[1:]:
        client.delete(f"{BASE}/{stage_id}", params={"confirm": "true"})

    response = client.delete(f"{BASE}/{stage_ids[0]}", params={"confirm": "true"})
    assert response.status_code == 400


def test_update_stage_meta(client: TestClient):
    response = client.patch(f"{BASE}/deal-lock", json={"status": "active", "startDate": "2025-01-01"})
    assert response.status_code == 200
    assert response.json()["status"] == "active"
    assert response.json()["startDate"] == "2025-01-01"


def test_activate_stage(client: TestClient):
    response = client.post(f"{BASE}/final-design/activate")
    assert response.status_code == 200
    assert response.json()["currentStageId"] == "final-design"

    stages = client.get(BASE).json()["data"]
    index = [s["id"] for s in stages].index("final-design")
    assert all(s["status"] == "completed" for s in stages[:index])
    assert stages[index]["status"] == "active"
    assert all(s["status"] == "pending" for s in stages[index + 1:])

    project = client.get("/projects/5").json()
    assert project["currentStageName"] == "Final Design"


def test_unknown_stage(client: TestClient):
    assert client.get(f"{BASE}/nope").status_code == 404


# ============================================================
# Tasks
# ============================================================
def test_create_task_defaults(client: TestClient):
    task = _create_task(client, requirements="Measure plot\n\nPhotograph access road")
    assert task["dueDate"] == "ASAP"
    assert task["status"] == "pending"
    assert task["assignedTo"] == "Principal Architect"
    assert task["requirements"] == ["Measure plot", "Photograph access road"]
    assert task["blocked"] is False


def test_create_task_requires_title(client: TestClient):
    assert client.post(f"{FIRST}/tasks", json={"title": ""}).status_code == 422


def test_create_task_requires_can_edit(client: TestClient, as_role):
    as_role("Client")
    assert client.post(f"{FIRST}/tasks", json={"title": "Nope"}).status_code == 403


def test_forward_dependency_rejected(client: TestClient):
    later = _create_task(client, stage_url=f"{BASE}/deal-lock")
    response = client.post(f"{FIRST}/tasks", json={"title": "Too early", "dependencies": [later["id"]]})
    assert response.status_code == 422


def test_blocked_task_cannot_toggle(client: TestClient):
    first = _create_task(client, title="Sign brief")
    second = _create_task(client, stage_url=f"{BASE}/ideation-concept", title="Sketch", dependencies=[first["id"]])
    assert second["blocked"] is True
    assert second["blockingTasks"] == ["Sign brief"]

    url = f"{BASE}/ideation-concept/tasks/{second['id']}/toggle"
    assert client.post(url).status_code == 409

    client.post(f"{FIRST}/tasks/{first['id']}/toggle")
    response = client.post(url)
    assert response.status_code == 200
    assert response.json()["task"]["status"] == "completed"


def test_toggle_recomputes_stage_status(client: TestClient):
    stage = client.get(FIRST).json()
    task_id = stage["tasks"][0]["id"]

    response = client.post(f"{FIRST}/tasks/{task_id}/toggle")
    assert response.status_code == 200
    body = response.json()
    assert body["task"]["status"] == "completed"
    assert body["task"]["completedAt"] is not None
    assert body["stageStatus"] == "completed"

    body = client.post(f"{FIRST}/tasks/{task_id}/toggle").json()
    assert body["task"]["status"] == "pending"
    assert body["task"]["completedAt"] is None
    assert body["stageStatus"] == "active"


def test_update_task(client: TestClient):
    task = _create_task(client)
    response = client.put(
        f"{FIRST}/tasks/{task['id']}",
        json={"title": "Survey north plot", "dueDate": "2030-01-01", "assignedTo": "Site Engineer"},
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Survey north plot"
    assert response.json()["assignedTo"] == "Site Engineer"


def test_task_cannot_depend_on_itself(client: TestClient):
    task = _create_task(client)
    response = client.put(f"{FIRST}/tasks/{task['id']}", json={"title": "Loop", "dependencies": [task["id"]]})
    assert response.status_code == 422


def test_mutual_dependency_rejected(client: TestClient):
    first = _create_task(client, title="Measure plot")
    second = _create_task(client, title="Draft survey", dependencies=[first["id"]])

    response = client.put(
        f"{FIRST}/tasks/{first['id']}",
        json={"title": "Measure plot", "dependencies": [second["id"]]},
    )
    assert response.status_code == 422

    stored = next(t for t in client.get(FIRST).json()["tasks"] if t["id"] == first["id"])
    assert stored["dependencies"] == []


def test_delete_task(client: TestClient):
    task = _create_task(client)
    assert client.delete(f"{FIRST}/tasks/{task['id']}").status_code == 200
    assert client.delete(f"{FIRST}/tasks/{task['id']}").status_code == 404


def test_task_assignment_grants_stage_access(client: TestClient, as_role):
    _create_task(client, stage_url=f"{BASE}/deal-lock", assignedTo="Marketing Dept")

    as_role("Marketing Dept")
    assert client.get(f"{BASE}/deal-lock").status_code == 200
    assert client.get(FIRST).status_code == 403


def test_mutations_are_recorded_in_history(client: TestClient):
    _create_task(client, title="Soil test")
    history = client.get("/projects/5").json()["history"]
    assert history[-1]["action"] == "Added task"
    assert history[-1]["target"] == "Soil test"
    assert history[-1]["user"] == "Sadia Rahman"


# ============================================================
# Assets + discussions
# ============================================================
def test_add_and_delete_asset(client: TestClient):
    response = client.post(f"{FIRST}/assets", json={"title": "Site.dwg", "size": 2048})
    assert response.status_code == 201
    asset = response.json()
    assert asset["type"] == "cad"
    assert asset["uploadedBy"] == "Sadia Rahman"

    assert client.delete(f"{FIRST}/assets/{asset['id']}").status_code == 200
    assert client.delete(f"{FIRST}/assets/{asset['id']}").status_code == 404


def test_asset_over_quota(client: TestClient, monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_LIMIT_BYTES", 1)
    response = client.post(f"{FIRST}/assets", json={"title": "Model.glb", "size": 10})
    assert response.status_code == 507


def test_post_comment(client: TestClient, as_role):
    as_role("Client")
    response = client.post("/projects/1/stages/client-onboarding/discussions", json={"text": "Looks good"})
    assert response.status_code == 201
    comment = response.json()
    assert comment["author"] == "Jamal Ahmed"
    assert comment["role"] == "Client"

    stage = client.get("/projects/1/stages/client-onboarding").json()
    assert stage["discussions"][-1]["text"] == "Looks good"
