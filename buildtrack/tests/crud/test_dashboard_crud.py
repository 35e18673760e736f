import pytest
from sqlalchemy.orm import Session

from buildtrack.crud import dashboard as crud_dashboard
from buildtrack.models.user import User as UserModel
from buildtrack.core.exceptions import DashboardValidationError, DashboardNotFound, ProfileNotFound

def _dashboard(dashboard_id: str, name: str = "Board"):
    return {"id": dashboard_id, "name": name, "widgets": [], "layouts": {"desktop": [], "tablet": [], "mobile": []}}

def test_get_dashboard_missing(db: Session, test_user: UserModel):
    assert crud_dashboard.get_dashboard(db, test_user.id) is None

def test_save_appends_then_replaces(db: Session, test_user: UserModel):
    assert crud_dashboard.save_dashboard(db, test_user.id, _dashboard("default", "One")) == "default"
    crud_dashboard.save_dashboard(db, test_user.id, _dashboard("site-a"))
    crud_dashboard.save_dashboard(db, test_user.id, _dashboard("default", "Two"))

    db.refresh(test_user)
    stored = test_user.preferences["dashboards"]
    assert [d["id"] for d in stored] == ["default", "site-a"]
    assert crud_dashboard.get_dashboard(db, test_user.id, "default")["name"] == "Two"

def test_save_last_writer_wins(db: Session, test_user: UserModel):
    first = {**_dashboard("default"), "widgets": [{"id": "a"}]}
    second = {**_dashboard("default"), "widgets": [{"id": "b"}]}
    crud_dashboard.save_dashboard(db, test_user.id, first)
    crud_dashboard.save_dashboard(db, test_user.id, second)
    assert crud_dashboard.get_dashboard(db, test_user.id)["widgets"] == [{"id": "b"}]

@pytest.mark.parametrize("payload", [None, {}, {"name": "no id"}, {"id": ""}])
def test_save_rejects_missing_id(db: Session, test_user: UserModel, payload):
    with pytest.raises(DashboardValidationError):
        crud_dashboard.save_dashboard(db, test_user.id, payload)

def test_save_ignores_malformed_dashboards_value(db: Session, test_user: UserModel):
    test_user.preferences = {"dashboards": "corrupt", "theme": "dark"}
    db.commit()
    crud_dashboard.save_dashboard(db, test_user.id, _dashboard("default"))
    db.refresh(test_user)
    assert test_user.preferences["theme"] == "dark"
    assert len(test_user.preferences["dashboards"]) == 1

def test_list_and_delete(db: Session, test_user: UserModel):
    crud_dashboard.save_dashboard(db, test_user.id, {**_dashboard("default"), "isDefault": True})
    crud_dashboard.save_dashboard(db, test_user.id, _dashboard("site-a", "Site A"))
    assert crud_dashboard.list_dashboards(db, test_user.id) == [
        {"id": "default", "name": "Board", "isDefault": True},
        {"id": "site-a", "name": "Site A", "isDefault": False},
    ]

    crud_dashboard.delete_dashboard(db, test_user.id, "site-a")
    assert [d["id"] for d in crud_dashboard.list_dashboards(db, test_user.id)] == ["default"]
    with pytest.raises(DashboardNotFound):
        crud_dashboard.delete_dashboard(db, test_user.id, "site-a")

def test_unknown_user(db: Session):
    with pytest.raises(ProfileNotFound):
        crud_dashboard.get_dashboard(db, 99999)
