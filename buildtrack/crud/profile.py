#buildtrack/crud/profile.py
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple
import copy
import logging

from buildtrack.models.user import User
from buildtrack.models.project import Project
from buildtrack.core.exceptions import ProfileNotFound, ProfileValidationError

logger = logging.getLogger("BuildTrack.Profile")

# Preference fields that live in their own columns rather than in the JSON blob
STANDALONE_PREFERENCE_FIELDS = {
    "language": "language",
    "timezone": "timezone",
    "preferredContactMethod": "preferred_contact_method",
    "offlineAccess": "offline_access",
    "dataUsagePreferences": "data_usage_preferences",
}

PROFILE_UPDATABLE_FIELDS = [
    "first_name", "last_name", "avatar_url", "phone_number",
    "job_title", "department", "skills", "certifications",
    "preferred_contact_method", "timezone", "language", "preferences",
    "dashboard_layout", "recent_projects", "favorite_tools",
    "offline_access", "data_usage_preferences",
    "last_active_project_id", "onboarding_status",
]

# Non-nullable columns; an explicit null resets them instead
NULL_RESETS = {"skills": list, "certifications": list, "offline_access": bool}

DEFAULT_DASHBOARD_LAYOUT = {"widgets": [], "layout": "default"}
MAX_RECENT_PROJECTS = 10

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def _commit(db: Session, user: User, action: str) -> User:
    try:
        db.commit()
        db.refresh(user)
        logger.info(f"{action} for user {user.id}")
        return user
    except Exception as e:
        db.rollback()
        logger.error(f"Failed: {action.lower()} for user {user.id}: {e}")
        raise ProfileValidationError(f"Database error: {action.lower()}.")

def get_profile(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise ProfileNotFound()
    return user

def get_last_active_project(db: Session, user: User) -> Optional[Project]:
    if user.last_active_project_id is None:
        return None
    return db.query(Project).filter(Project.id == user.last_active_project_id).first()

def update_profile(db: Session, user_id: int, data: Dict[str, Any]) -> User:
    """
    Write only the provided fields among the updatable set.
    """
    user = get_profile(db, user_id)
    for field in PROFILE_UPDATABLE_FIELDS:
        if field in data:
            value = data[field]
            if value is None and field in NULL_RESETS:
                value = NULL_RESETS[field]()
            setattr(user, field, value)
    return _commit(db, user, "Updated profile")

# --- Preferences ---

def build_preferences_view(user: User) -> Dict[str, Any]:
    """
    Stored preferences merged with the standalone preference columns.
    """
    view = dict(user.preferences or {})
    for key, column in STANDALONE_PREFERENCE_FIELDS.items():
        view[key] = getattr(user, column)
    return view

def update_preferences(db: Session, user_id: int, body: Dict[str, Any]) -> User:
    """
    Standalone fields go to their columns; every other key is shallow-merged
    into the stored preferences document.
    """
    user = get_profile(db, user_id)
    others = {}
    for key, value in body.items():
        if key in STANDALONE_PREFERENCE_FIELDS:
            column = STANDALONE_PREFERENCE_FIELDS[key]
            if value is None and column in NULL_RESETS:
                value = NULL_RESETS[column]()
            setattr(user, column, value)
        else:
            others[key] = value
    if others:
        user.preferences = {**(user.preferences or {}), **others}
    return _commit(db, user, "Updated preferences")

# --- Device tokens ---

def register_device_token(db: Session, user_id: int, token: str, device: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Add a push token, or refresh it if already registered.
    An existing entry keeps its device name unless a new one is given.
    """
    user = get_profile(db, user_id)
    tokens = copy.deepcopy(user.device_tokens or [])
    if any(t.get("token") == token for t in tokens):
        tokens = [
            {"token": token, "device": device or t.get("device"), "lastUpdated": _now_iso()}
            if t.get("token") == token else t
            for t in tokens
        ]
    else:
        tokens.append({"token": token, "device": device or "unknown", "lastUpdated": _now_iso()})
    user.device_tokens = tokens
    _commit(db, user, "Registered device token")
    return tokens

def remove_device_token(db: Session, user_id: int, token: str) -> Tuple[bool, List[Dict[str, Any]]]:
    """
    Returns (removed, remaining tokens). Nothing is written when the token is unknown.
    """
    user = get_profile(db, user_id)
    tokens = user.device_tokens or []
    remaining = [t for t in tokens if t.get("token") != token]
    if len(remaining) == len(tokens):
        return False, remaining
    user.device_tokens = remaining
    _commit(db, user, "Removed device token")
    return True, remaining

# --- Dashboard layout, recent projects, favorite tools ---

def get_dashboard_layout(db: Session, user_id: int) -> Dict[str, Any]:
    user = get_profile(db, user_id)
    return {
        "dashboardLayout": user.dashboard_layout or dict(DEFAULT_DASHBOARD_LAYOUT),
        "recentProjects": user.recent_projects or [],
        "favoriteTools": user.favorite_tools or [],
    }

def set_dashboard_layout(db: Session, user_id: int, layout: Any, widgets: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Replace the layout. Widgets are reduced to id/type/position/size/settings.
    """
    user = get_profile(db, user_id)
    dashboard_layout = {
        "layout": layout,
        "widgets": [
            {
                "id": w.get("id"),
                "type": w.get("type"),
                "position": w.get("position"),
                "size": w.get("size"),
                "settings": w.get("settings") or {},
            }
            for w in widgets
        ],
    }
    user.dashboard_layout = dashboard_layout
    _commit(db, user, "Updated dashboard layout")
    return dashboard_layout

def add_recent_project(
    db: Session,
    user_id: int,
    project_id: Any,
    project_name: Optional[str] = None,
    thumbnail_url: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Move the project to the front of the recent list, keeping at most ten.
    Also marks it as the last active project.
    """
    user = get_profile(db, user_id)
    recent = [p for p in (user.recent_projects or []) if p.get("id") != project_id]
    recent.insert(0, {
        "id": project_id,
        "name": project_name or "Unnamed Project",
        "thumbnailUrl": thumbnail_url,
        "accessedAt": _now_iso(),
    })
    recent = recent[:MAX_RECENT_PROJECTS]
    user.recent_projects = recent
    if isinstance(project_id, int):
        user.last_active_project_id = project_id
    elif isinstance(project_id, str) and project_id.isdigit():
        user.last_active_project_id = int(project_id)
    _commit(db, user, "Added recent project")
    return recent

def add_favorite_tool(
    db: Session,
    user_id: int,
    tool_id: Any,
    tool_name: str,
    tool_icon: Optional[str] = None,
) -> Tuple[bool, List[Dict[str, Any]]]:
    """
    Returns (added, tools). Already present tools are left untouched.
    """
    user = get_profile(db, user_id)
    tools = list(user.favorite_tools or [])
    if any(t.get("id") == tool_id for t in tools):
        return False, tools
    tools.append({"id": tool_id, "name": tool_name, "icon": tool_icon, "addedAt": _now_iso()})
    user.favorite_tools = tools
    _commit(db, user, "Added favorite tool")
    return True, tools

def remove_favorite_tool(db: Session, user_id: int, tool_id: Any) -> List[Dict[str, Any]]:
    user = get_profile(db, user_id)
    tools = [t for t in (user.favorite_tools or []) if t.get("id") != tool_id]
    user.favorite_tools = tools
    _commit(db, user, "Removed favorite tool")
    return tools

# --- Language ---

def set_language(db: Session, user_id: int, locale: str) -> User:
    user = get_profile(db, user_id)
    user.language = locale
    user.updated_at = datetime.now(timezone.utc)
    return _commit(db, user, f"Set language to {locale}")
