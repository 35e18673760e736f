#tests/api/test_task_api.py
from fastapi.testclient import TestClient

def _project(client: TestClient, headers: dict, name: str = "Maple Street Homes") -> int:
    response = client.post("/projects/", json={"name": name, "project_type": "RESIDENTIAL"}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]

def _task(client: TestClient, headers: dict, project_id: int, **overrides):
    payload = {"title": "Pour foundation slab", "project_id": project_id}
    payload.update(overrides)
    return client.post("/tasks/", json=payload, headers=headers)

def test_create_task(client: TestClient, normal_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    response = _task(
        client,
        normal_user_token_headers,
        project_id,
        category="construction",
        priority="high",
        start_date="2026-04-01",
        due_date="2026-04-10",
        estimated_hours=16,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Pour foundation slab"
    assert data["project_id"] == project_id
    assert data["status"] == "todo"
    assert data["category"] == "construction"
    assert data["completed_at"] is None

def test_create_task_missing_project(client: TestClient, normal_user_token_headers: dict):
    response = _task(client, normal_user_token_headers, 999999)
    assert response.status_code == 404
    assert response.json()["detail"] == "Project with id 999999 not found."

def test_create_task_foreign_project(client: TestClient, normal_user_token_headers: dict, other_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    response = _task(client, other_user_token_headers, project_id)
    assert response.status_code == 403

def test_create_task_blank_title(client: TestClient, normal_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    response = _task(client, normal_user_token_headers, project_id, title="   ")
    assert response.status_code == 400
    assert response.json()["detail"] == "Task title is required."

def test_create_task_bad_dates(client: TestClient, normal_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    response = _task(client, normal_user_token_headers, project_id, start_date="2026-04-10", due_date="2026-04-01")
    assert response.status_code == 400
    assert response.json()["detail"] == "Due date must be after start date."

def test_create_completed_task_sets_completed_at(client: TestClient, normal_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    response = _task(client, normal_user_token_headers, project_id, status="completed")
    assert response.json()["completed_at"] is not None

def test_get_task_permissions(client: TestClient, normal_user_token_headers: dict, other_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    task_id = _task(client, normal_user_token_headers, project_id).json()["id"]
    assert client.get(f"/tasks/{task_id}", headers=normal_user_token_headers).status_code == 200
    response = client.get(f"/tasks/{task_id}", headers=other_user_token_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Not authorized to access this task"

def test_get_task_not_found(client: TestClient, normal_user_token_headers: dict):
    response = client.get("/tasks/999999", headers=normal_user_token_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Task not found"

def test_list_tasks_filters_and_order(client: TestClient, normal_user_token_headers: dict, test_user):
    project_id = _project(client, normal_user_token_headers)
    other_project = _project(client, normal_user_token_headers, name="Harbor Tower")
    _task(client, normal_user_token_headers, project_id, title="Frame walls", due_date="2026-05-20", category="construction")
    _task(client, normal_user_token_headers, project_id, title="Order lumber", due_date="2026-05-01", category="procurement", assignee_id=test_user.id)
    _task(client, normal_user_token_headers, other_project, title="Inspect rebar", due_date="2026-06-15", status="review")

    def titles(query: str = ""):
        response = client.get(f"/tasks/{query}", headers=normal_user_token_headers)
        assert response.status_code == 200
        return [t["title"] for t in response.json()]

    assert titles() == ["Order lumber", "Frame walls", "Inspect rebar"]
    assert titles(f"?project_id={project_id}") == ["Order lumber", "Frame walls"]
    assert titles("?task_status=review") == ["Inspect rebar"]
    assert titles("?category=procurement") == ["Order lumber"]
    assert titles(f"?assignee_id={test_user.id}") == ["Order lumber"]
    assert titles("?search=rebar") == ["Inspect rebar"]
    assert titles("?due_before=2026-05-31") == ["Order lumber", "Frame walls"]
    assert titles("?due_after=2026-05-10") == ["Frame walls", "Inspect rebar"]
    assert titles("?sort_by=title") == ["Frame walls", "Inspect rebar", "Order lumber"]

def test_list_tasks_scoped_to_owner(client: TestClient, normal_user_token_headers: dict, other_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    _task(client, normal_user_token_headers, project_id)
    assert client.get("/tasks/", headers=other_user_token_headers).json() == []
    response = client.get(f"/tasks/?project_id={project_id}", headers=other_user_token_headers)
    assert response.status_code == 403

def test_update_task_completion_tracking(client: TestClient, normal_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    task_id = _task(client, normal_user_token_headers, project_id).json()["id"]

    response = client.patch(f"/tasks/{task_id}", json={"status": "completed"}, headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json()["completed_at"] is not None

    # any transition is allowed, including out of completed
    response = client.patch(f"/tasks/{task_id}", json={"status": "todo"}, headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "todo"
    assert response.json()["completed_at"] is None

def test_update_task_fields(client: TestClient, normal_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    task_id = _task(client, normal_user_token_headers, project_id).json()["id"]
    response = client.patch(
        f"/tasks/{task_id}",
        json={"title": "Pour foundation slab (north)", "priority": "critical"},
        headers=normal_user_token_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Pour foundation slab (north)"
    assert data["priority"] == "critical"

def test_update_task_forbidden(client: TestClient, normal_user_token_headers: dict, other_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    task_id = _task(client, normal_user_token_headers, project_id).json()["id"]
    response = client.patch(f"/tasks/{task_id}", json={"title": "Mine now"}, headers=other_user_token_headers)
    assert response.status_code == 403

def test_archive_task(client: TestClient, normal_user_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    task_id = _task(client, normal_user_token_headers, project_id).json()["id"]

    response = client.delete(f"/tasks/{task_id}", headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json() == {"result": task_id, "detail": "Task archived"}
    assert client.get(f"/tasks/{task_id}", headers=normal_user_token_headers).status_code == 404
    assert client.get("/tasks/", headers=normal_user_token_headers).json() == []
    archived = client.get("/tasks/?show_archived=true", headers=normal_user_token_headers).json()
    assert [t["id"] for t in archived] == [task_id]

def test_superuser_sees_all_tasks(client: TestClient, normal_user_token_headers: dict, superuser_token_headers: dict):
    project_id = _project(client, normal_user_token_headers)
    task_id = _task(client, normal_user_token_headers, project_id).json()["id"]
    assert client.get(f"/tasks/{task_id}", headers=superuser_token_headers).status_code == 200
    assert [t["id"] for t in client.get("/tasks/", headers=superuser_token_headers).json()] == [task_id]
