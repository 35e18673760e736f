#tests/api/test_project_api.py
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from buildtrack.models.user import User as UserModel
from buildtrack.models.project import Project as ProjectModel

def _create(client: TestClient, headers: dict, **overrides):
    payload = {"name": "Riverside Office Renovation", "project_type": "RENOVATION"}
    payload.update(overrides)
    return client.post("/projects/", json=payload, headers=headers)

def test_create_project(client: TestClient, normal_user_token_headers: dict, test_user: UserModel):
    response = _create(
        client,
        normal_user_token_headers,
        description="Floors 2-4",
        start_date="2026-03-01",
        end_date="2026-11-30",
        budget=1250000,
        tags=["interior", "phase-1"],
        location={"city": "Porto Alegre", "country": "BR"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Riverside Office Renovation"
    assert data["owner_id"] == test_user.id
    assert data["status"] == "planning"
    assert data["priority"] == "MEDIUM"
    assert data["tags"] == ["interior", "phase-1"]
    assert data["is_deleted"] is False

def test_create_project_unauthenticated(client: TestClient):
    response = client.post("/projects/", json={"name": "Nope"})
    assert response.status_code == 401

def test_create_project_duplicate_name(client: TestClient, normal_user_token_headers: dict):
    assert _create(client, normal_user_token_headers).status_code == 201
    response = _create(client, normal_user_token_headers)
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]

def test_create_project_bad_dates(client: TestClient, normal_user_token_headers: dict):
    response = _create(client, normal_user_token_headers, start_date="2026-05-01", end_date="2026-04-01")
    assert response.status_code == 422

def test_create_project_blank_name(client: TestClient, normal_user_token_headers: dict):
    response = _create(client, normal_user_token_headers, name="   ")
    assert response.status_code == 400
    assert response.json()["detail"] == "Project name is required."

def test_get_project_owner_only(
    client: TestClient,
    normal_user_token_headers: dict,
    other_user_token_headers: dict,
    superuser_token_headers: dict,
):
    project_id = _create(client, normal_user_token_headers).json()["id"]
    assert client.get(f"/projects/{project_id}", headers=normal_user_token_headers).status_code == 200
    response = client.get(f"/projects/{project_id}", headers=other_user_token_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Not authorized to access this project"
    assert client.get(f"/projects/{project_id}", headers=superuser_token_headers).status_code == 200

def test_get_project_not_found(client: TestClient, normal_user_token_headers: dict):
    response = client.get("/projects/999999", headers=normal_user_token_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Project not found"

def test_list_projects_scoped_to_owner(client: TestClient, normal_user_token_headers: dict, other_user_token_headers: dict):
    _create(client, normal_user_token_headers, name="Mine")
    _create(client, other_user_token_headers, name="Theirs")
    names = [p["name"] for p in client.get("/projects/", headers=normal_user_token_headers).json()]
    assert names == ["Mine"]

def test_list_projects_filters(client: TestClient, normal_user_token_headers: dict):
    _create(client, normal_user_token_headers, name="Harbor Tower", project_type="COMMERCIAL", status="active", tags=["tower"])
    _create(client, normal_user_token_headers, name="Maple Street Homes", project_type="RESIDENTIAL", end_date="2026-06-30")

    def names(query: str):
        response = client.get(f"/projects/{query}", headers=normal_user_token_headers)
        assert response.status_code == 200
        return sorted(p["name"] for p in response.json())

    assert names("?project_status=active") == ["Harbor Tower"]
    assert names("?project_type=RESIDENTIAL") == ["Maple Street Homes"]
    assert names("?tag=tower") == ["Harbor Tower"]
    assert names("?search=maple") == ["Maple Street Homes"]
    assert names("?end_before=2026-12-31") == ["Maple Street Homes"]
    assert names("?sort_by=name") == ["Harbor Tower", "Maple Street Homes"]

def test_update_project(client: TestClient, normal_user_token_headers: dict):
    project_id = _create(client, normal_user_token_headers).json()["id"]
    response = client.patch(
        f"/projects/{project_id}",
        json={"status": "completed", "budget": 900000},
        headers=normal_user_token_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["budget"] == 900000
    assert data["name"] == "Riverside Office Renovation"

def test_update_project_any_status_transition(client: TestClient, normal_user_token_headers: dict):
    project_id = _create(client, normal_user_token_headers, status="completed").json()["id"]
    response = client.patch(f"/projects/{project_id}", json={"status": "planning"}, headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "planning"

def test_update_project_forbidden(client: TestClient, normal_user_token_headers: dict, other_user_token_headers: dict):
    project_id = _create(client, normal_user_token_headers).json()["id"]
    response = client.patch(f"/projects/{project_id}", json={"name": "Hijack"}, headers=other_user_token_headers)
    assert response.status_code == 403

def test_archive_and_restore_project(client: TestClient, normal_user_token_headers: dict, db: Session):
    project_id = _create(client, normal_user_token_headers).json()["id"]

    response = client.delete(f"/projects/{project_id}", headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json() == {"result": project_id, "detail": "Project archived"}
    assert client.get(f"/projects/{project_id}", headers=normal_user_token_headers).status_code == 404
    assert client.get("/projects/", headers=normal_user_token_headers).json() == []
    archived = client.get("/projects/?show_archived=true", headers=normal_user_token_headers).json()
    assert [p["id"] for p in archived] == [project_id]

    response = client.delete(f"/projects/{project_id}", headers=normal_user_token_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Project already archived."

    response = client.post(f"/projects/{project_id}/restore", headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json()["detail"] == "Project restored"
    project = db.query(ProjectModel).filter(ProjectModel.id == project_id).first()
    assert project.is_deleted is False
    assert project.deleted_at is None

def test_restore_active_project(client: TestClient, normal_user_token_headers: dict):
    project_id = _create(client, normal_user_token_headers).json()["id"]
    response = client.post(f"/projects/{project_id}/restore", headers=normal_user_token_headers)
    assert response.status_code == 400

def test_archived_name_can_be_reused(client: TestClient, normal_user_token_headers: dict):
    project_id = _create(client, normal_user_token_headers).json()["id"]
    client.delete(f"/projects/{project_id}", headers=normal_user_token_headers)
    assert _create(client, normal_user_token_headers).status_code == 201

def test_suggest_type(client: TestClient, normal_user_token_headers: dict):
    response = client.post(
        "/api/projects/suggest-type",
        json={"name": "Downtown office tower", "description": "New corporate headquarters with retail podium"},
        headers=normal_user_token_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["shouldSuggest"] is True
    assert data["suggestions"][0]["type"] == "COMMERCIAL"
    assert data["suggestions"][0]["confidence"] == 1

def test_suggest_type_short_input(client: TestClient, normal_user_token_headers: dict):
    response = client.post("/api/projects/suggest-type", json={"name": "Lot 7"}, headers=normal_user_token_headers)
    data = response.json()
    assert data["shouldSuggest"] is False
    assert data["suggestions"] == [{
        "type": "OTHER",
        "confidence": 0.4,
        "reason": "Unable to determine specific project type from description",
    }]

def test_suggest_type_requires_login(client: TestClient):
    response = client.post("/api/projects/suggest-type", json={"name": "Office"})
    assert response.status_code == 401
