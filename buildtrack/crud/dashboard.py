#buildtrack/crud/dashboard.py
"""
Dashboard persistence.

Dashboards are JSON documents kept in ``User.preferences["dashboards"]``.
Saving scans that array for a matching id and replaces or appends the whole
document, then writes the preferences back. There is no versioning: two
clients saving the same dashboard overwrite each other, last writer wins.
"""
from sqlalchemy.orm import Session
from typing import Optional, List, Dict, Any
import copy
import logging

from buildtrack.models.user import User
from buildtrack.core.exceptions import (
    DashboardValidationError,
    DashboardNotFound,
    ProfileNotFound,
)

logger = logging.getLogger("BuildTrack.Dashboard")

DEFAULT_DASHBOARD_ID = "default"

def _load_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise ProfileNotFound()
    return user

def _stored_dashboards(user: User) -> List[Dict[str, Any]]:
    preferences = user.preferences or {}
    dashboards = preferences.get("dashboards")
    return dashboards if isinstance(dashboards, list) else []

def get_dashboard(db: Session, user_id: int, dashboard_id: str = DEFAULT_DASHBOARD_ID) -> Optional[Dict[str, Any]]:
    """
    Stored dashboard with this id, or None.
    """
    user = _load_user(db, user_id)
    for dashboard in _stored_dashboards(user):
        if isinstance(dashboard, dict) and dashboard.get("id") == dashboard_id:
            return dashboard
    return None

def list_dashboards(db: Session, user_id: int) -> List[Dict[str, Any]]:
    user = _load_user(db, user_id)
    return [
        {"id": d.get("id"), "name": d.get("name"), "isDefault": bool(d.get("isDefault", False))}
        for d in _stored_dashboards(user)
        if isinstance(d, dict)
    ]

def save_dashboard(db: Session, user_id: int, dashboard: Any) -> Any:
    """
    Replace the dashboard with the same id, or append it. Returns the id.

    Only the presence of an id is checked; the document is stored as given.
    """
    if not dashboard or not isinstance(dashboard, dict) or not dashboard.get("id"):
        raise DashboardValidationError("Invalid dashboard data")

    user = _load_user(db, user_id)
    preferences = copy.deepcopy(user.preferences or {})
    dashboards = preferences.get("dashboards")
    if not isinstance(dashboards, list):
        dashboards = []

    index = next(
        (i for i, d in enumerate(dashboards) if isinstance(d, dict) and d.get("id") == dashboard["id"]),
        -1,
    )
    if index >= 0:
        dashboards[index] = dashboard
    else:
        dashboards.append(dashboard)
    preferences["dashboards"] = dashboards
    # reassign so the JSON column is flagged dirty
    user.preferences = preferences

    try:
        db.commit()
        logger.info(
            f"{'Replaced' if index >= 0 else 'Added'} dashboard '{dashboard['id']}' for user {user_id}"
        )
        return dashboard["id"]
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving dashboard for user {user_id}: {e}")
        raise

def delete_dashboard(db: Session, user_id: int, dashboard_id: str) -> None:
    user = _load_user(db, user_id)
    dashboards = _stored_dashboards(user)
    remaining = [d for d in dashboards if not (isinstance(d, dict) and d.get("id") == dashboard_id)]
    if len(remaining) == len(dashboards):
        raise DashboardNotFound(f"Dashboard '{dashboard_id}' not found")
    user.preferences = {**(user.preferences or {}), "dashboards": remaining}
    try:
        db.commit()
        logger.info(f"Deleted dashboard '{dashboard_id}' for user {user_id}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting dashboard '{dashboard_id}' for user {user_id}: {e}")
        raise
