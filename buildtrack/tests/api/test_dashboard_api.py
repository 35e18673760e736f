#tests/api/test_dashboard_api.py
import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from buildtrack.models.user import User as UserModel
from buildtrack.core.widget_catalog import build_default_dashboard, WIDGET_CATALOG

def _dashboard(dashboard_id: str = "default", name: str = "Default Dashboard", **extra):
    data = {
        "id": dashboard_id,
        "name": name,
        "isDefault": dashboard_id == "default",
        "widgets": [],
        "layouts": {"desktop": [], "tablet": [], "mobile": []},
    }
    data.update(extra)
    return data

def test_get_dashboard_requires_login(client: TestClient):
    response = client.get("/api/dashboard")
    assert response.status_code == 401
    assert response.json() == {
        "error": "Unauthorized",
        "message": "You must be logged in to access this resource",
    }

def test_get_dashboard_with_bad_token(client: TestClient):
    response = client.get("/api/dashboard", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized"

def test_get_dashboard_none_stored(client: TestClient, normal_user_token_headers: dict):
    response = client.get("/api/dashboard", headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json() == {"dashboard": None}

def test_save_and_get_dashboard(client: TestClient, normal_user_token_headers: dict):
    dashboard = build_default_dashboard()
    response = client.post("/api/dashboard", json={"dashboard": dashboard}, headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "dashboardId": "default"}

    response = client.get("/api/dashboard?id=default", headers=normal_user_token_headers)
    assert response.status_code == 200
    stored = response.json()["dashboard"]
    assert stored == dashboard
    assert len(stored["widgets"]) == 4

def test_save_replaces_same_id(client: TestClient, normal_user_token_headers: dict, test_user: UserModel, db: Session):
    client.post("/api/dashboard", json={"dashboard": _dashboard(name="First")}, headers=normal_user_token_headers)
    client.post("/api/dashboard", json={"dashboard": _dashboard(name="Second")}, headers=normal_user_token_headers)

    db.refresh(test_user)
    dashboards = test_user.preferences["dashboards"]
    assert len(dashboards) == 1
    assert dashboards[0]["name"] == "Second"

def test_save_appends_new_id(client: TestClient, normal_user_token_headers: dict):
    client.post("/api/dashboard", json={"dashboard": _dashboard()}, headers=normal_user_token_headers)
    client.post("/api/dashboard", json={"dashboard": _dashboard("site-a", "Site A")}, headers=normal_user_token_headers)

    response = client.get("/api/dashboard/list", headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json()["dashboards"] == [
        {"id": "default", "name": "Default Dashboard", "isDefault": True},
        {"id": "site-a", "name": "Site A", "isDefault": False},
    ]

def test_save_keeps_other_preferences(client: TestClient, normal_user_token_headers: dict, test_user: UserModel, db: Session):
    test_user.preferences = {"theme": "dark"}
    db.commit()
    client.post("/api/dashboard", json={"dashboard": _dashboard()}, headers=normal_user_token_headers)
    db.refresh(test_user)
    assert test_user.preferences["theme"] == "dark"
    assert len(test_user.preferences["dashboards"]) == 1

def test_save_without_id(client: TestClient, normal_user_token_headers: dict):
    response = client.post("/api/dashboard", json={"dashboard": {"name": "No id"}}, headers=normal_user_token_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid dashboard data"

def test_save_without_dashboard(client: TestClient, normal_user_token_headers: dict):
    response = client.post("/api/dashboard", json={}, headers=normal_user_token_headers)
    assert response.status_code == 400

    response = client.post("/api/dashboard", headers=normal_user_token_headers)
    assert response.status_code == 400

@pytest.mark.parametrize("body", [{"dashboard": "abc"}, {"dashboard": ["x"]}, {"dashboard": 5}, ["x"], "plain"])
def test_save_non_object_dashboard(client: TestClient, normal_user_token_headers: dict, body):
    response = client.post("/api/dashboard", json=body, headers=normal_user_token_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid dashboard data"}

def test_get_dashboard_unexpected_failure(client: TestClient, normal_user_token_headers: dict):
    with patch("buildtrack.crud.dashboard.get_dashboard", side_effect=RuntimeError("database unavailable")):
        response = client.get("/api/dashboard", headers=normal_user_token_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}

def test_save_dashboard_unexpected_failure(client: TestClient, normal_user_token_headers: dict):
    with patch("buildtrack.crud.dashboard.save_dashboard", side_effect=RuntimeError("database unavailable")):
        response = client.post("/api/dashboard", json={"dashboard": _dashboard()}, headers=normal_user_token_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}

def test_dashboards_are_per_user(client: TestClient, normal_user_token_headers: dict, other_user_token_headers: dict):
    client.post("/api/dashboard", json={"dashboard": _dashboard()}, headers=normal_user_token_headers)
    response = client.get("/api/dashboard", headers=other_user_token_headers)
    assert response.json() == {"dashboard": None}

def test_delete_dashboard(client: TestClient, normal_user_token_headers: dict):
    client.post("/api/dashboard", json={"dashboard": _dashboard("site-a", "Site A")}, headers=normal_user_token_headers)
    response = client.delete("/api/dashboard?id=site-a", headers=normal_user_token_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "dashboardId": "site-a"}
    assert client.get("/api/dashboard?id=site-a", headers=normal_user_token_headers).json() == {"dashboard": None}

def test_delete_missing_dashboard(client: TestClient, normal_user_token_headers: dict):
    response = client.delete("/api/dashboard?id=ghost", headers=normal_user_token_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"

def test_widget_catalog(client: TestClient):
    response = client.get("/api/widgets/catalog")
    assert response.status_code == 200
    catalog = response.json()
    assert len(catalog) == len(WIDGET_CATALOG)
    assert {w["type"] for w in catalog} >= {"ACTIVE_PROJECTS", "MY_TASKS", "NOTIFICATION_CENTER"}

def test_health(client: TestClient):
    for path in ("/", "/api/health"):
        response = client.get(path)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["environment"] == "test"
        assert "timestamp" in body
