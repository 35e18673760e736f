#buildtrack/api/profile.py
from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional, Dict, Any
import logging

from buildtrack.schemas.profile import (
    ProfileRead,
    ProfileUpdate,
    ProfileResponse,
    ProjectSummary,
    PreferencesResponse,
    DeviceTokenRegister,
    DeviceTokenResponse,
    DashboardLayoutResponse,
    DashboardLayoutUpdate,
    LanguagePreference,
)
from buildtrack.crud import profile as crud_profile
from buildtrack.core.exceptions import ApiError, ProfileNotFound
from buildtrack.core.i18n import is_supported_locale, supported_locales
from buildtrack.dependencies import get_db, require_api_user
from buildtrack.models.user import User as DBUser

router = APIRouter(prefix="/api/profile", tags=["Profile"])
language_router = APIRouter(prefix="/api/profiles", tags=["Profile"])
logger = logging.getLogger("BuildTrack.ProfileAPI")

def _bad_request(message: str) -> ApiError:
    return ApiError(400, "Bad Request", message)

def _not_found(message: str = "User profile not found") -> ApiError:
    return ApiError(404, "Profile Not Found", message)

def _server_error(message: str) -> ApiError:
    return ApiError(500, "Internal Server Error", message)

def _profile_payload(db: Session, user: DBUser) -> ProfileRead:
    profile = ProfileRead.model_validate(user)
    project = crud_profile.get_last_active_project(db, user)
    if project is not None:
        profile.last_active_project = ProjectSummary.model_validate(project)
    return profile

# --- Profile ---

@router.get("", response_model=ProfileResponse)
def read_profile(
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    try:
        user = crud_profile.get_profile(db, current_user.id)
        return ProfileResponse(profile=_profile_payload(db, user), message="Profile retrieved successfully")
    except ProfileNotFound:
        raise _not_found("Profile data could not be retrieved")
    except Exception as e:
        logger.error(f"Error fetching profile for user {current_user.id}: {e}", exc_info=True)
        raise _server_error("An error occurred while retrieving the profile")

@router.patch("", response_model=ProfileResponse)
def patch_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    """
    Partial update; only fields present in the body are written.
    """
    try:
        user = crud_profile.update_profile(db, current_user.id, data.model_dump(exclude_unset=True))
        return ProfileResponse(profile=_profile_payload(db, user), message="Profile updated successfully")
    except ProfileNotFound:
        raise _not_found("The profile you are trying to update does not exist")
    except Exception as e:
        logger.error(f"Error updating profile for user {current_user.id}: {e}", exc_info=True)
        raise _server_error("An error occurred while updating the profile")

# --- Preferences ---

@router.get("/preferences", response_model=PreferencesResponse)
def read_preferences(
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    try:
        user = crud_profile.get_profile(db, current_user.id)
        return PreferencesResponse(
            preferences=crud_profile.build_preferences_view(user),
            message="Preferences retrieved successfully",
        )
    except ProfileNotFound:
        raise _not_found("User preferences could not be retrieved")
    except Exception as e:
        logger.error(f"Error fetching preferences for user {current_user.id}: {e}", exc_info=True)
        raise _server_error("An error occurred while retrieving preferences")

@router.patch("/preferences", response_model=PreferencesResponse)
def patch_preferences(
    body: Optional[Dict[str, Any]] = Body(None),
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    try:
        user = crud_profile.update_preferences(db, current_user.id, body or {})
        return PreferencesResponse(
            preferences=crud_profile.build_preferences_view(user),
            message="Preferences updated successfully",
        )
    except ProfileNotFound:
        raise _not_found()
    except Exception as e:
        logger.error(f"Error updating preferences for user {current_user.id}: {e}", exc_info=True)
        raise _server_error("An error occurred while updating preferences")

# --- Device tokens ---

@router.post("/device-tokens", response_model=DeviceTokenResponse)
def register_device_token(
    data: DeviceTokenRegister,
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    if not data.token:
        raise _bad_request("Device token is required")
    try:
        tokens = crud_profile.register_device_token(db, current_user.id, data.token, data.device)
        return DeviceTokenResponse(message="Device token registered successfully", deviceCount=len(tokens))
    except ProfileNotFound:
        raise _not_found()
    except Exception as e:
        logger.error(f"Error registering device token for user {current_user.id}: {e}", exc_info=True)
        raise _server_error("An error occurred while registering the device token")

@router.delete("/device-tokens", response_model=DeviceTokenResponse)
def remove_device_token(
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    if not token:
        raise _bad_request("Device token is required")
    try:
        removed, remaining = crud_profile.remove_device_token(db, current_user.id, token)
    except ProfileNotFound:
        raise _not_found()
    except Exception as e:
        logger.error(f"Error removing device token for user {current_user.id}: {e}", exc_info=True)
        raise _server_error("An error occurred while removing the device token")
    message = "Device token removed successfully" if removed else "Device token not found"
    return DeviceTokenResponse(message=message, deviceCount=len(remaining))

# --- Dashboard layout, recent projects, favorite tools ---

@router.get("/dashboard-layout", response_model=DashboardLayoutResponse)
def read_dashboard_layout(
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    try:
        layout = crud_profile.get_dashboard_layout(db, current_user.id)
        return DashboardLayoutResponse(**layout, message="Dashboard layout retrieved successfully")
    except ProfileNotFound:
        raise _not_found("User dashboard layout could not be retrieved")
    except Exception as e:
        logger.error(f"Error fetching dashboard layout for user {current_user.id}: {e}", exc_info=True)
        raise _server_error("An error occurred while retrieving dashboard layout")

@router.put("/dashboard-layout")
def put_dashboard_layout(
    data: DashboardLayoutUpdate,
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    if not data.layout or not isinstance(data.widgets, list):
        raise _bad_request("Invalid dashboard layout data")
    if not all(isinstance(w, dict) for w in data.widgets):
        raise _bad_request("Invalid dashboard layout data")
    try:
        dashboard_layout = crud_profile.set_dashboard_layout(db, current_user.id, data.layout, data.widgets)
        return {"message": "Dashboard layout updated successfully", "dashboardLayout": dashboard_layout}
    except ProfileNotFound:
        raise _not_found()
    except Exception as e:
        logger.error(f"Error updating dashboard layout for user {current_user.id}: {e}", exc_info=True)
        raise _server_error("An error occurred while updating dashboard layout")

@router.patch("/dashboard-layout")
def patch_dashboard_layout(
    operation: Optional[str] = Query(None),
    body: Optional[Dict[str, Any]] = Body(None),
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    """
    Operations: add-recent-project, add-favorite-tool, remove-favorite-tool.
    """
    body = body or {}
    try:
        if operation == "add-recent-project":
            if not body.get("projectId"):
                raise _bad_request("Project ID is required")
            recent = crud_profile.add_recent_project(
                db, current_user.id, body["projectId"], body.get("projectName"), body.get("thumbnailUrl")
            )
            return {"message": "Recent project added successfully", "recentProjects": recent}

        if operation == "add-favorite-tool":
            if not body.get("toolId") or not body.get("toolName"):
                raise _bad_request("Tool ID and name are required")
            added, tools = crud_profile.add_favorite_tool(
                db, current_user.id, body["toolId"], body["toolName"], body.get("toolIcon")
            )
            message = "Favorite tool added successfully" if added else "Tool already in favorites"
            return {"message": message, "favoriteTools": tools}

        if operation == "remove-favorite-tool":
            if not body.get("toolId"):
                raise _bad_request("Tool ID is required")
            tools = crud_profile.remove_favorite_tool(db, current_user.id, body["toolId"])
            return {"message": "Favorite tool removed successfully", "favoriteTools": tools}

        raise _bad_request("Invalid operation")
    except ApiError:
        raise
    except ProfileNotFound:
        raise _not_found()
    except Exception as e:
        logger.error(f"Error in dashboard-layout {operation} for user {current_user.id}: {e}", exc_info=True)
        raise _server_error("An error occurred while updating dashboard preferences")

# --- Language preference ---

@language_router.get("/language")
def read_language(
    current_user: DBUser = Depends(require_api_user),
):
    return {"locale": current_user.language or "en"}

@language_router.put("/language")
def put_language(
    data: LanguagePreference,
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    if not data.locale:
        raise ApiError(400, "Invalid request: No locale specified")
    if not is_supported_locale(data.locale):
        raise ApiError(400, f"Invalid locale: Supported locales are {', '.join(supported_locales())}")
    try:
        crud_profile.set_language(db, current_user.id, data.locale)
    except ProfileNotFound:
        raise _not_found()
    except Exception as e:
        logger.error(f"Error updating language for user {current_user.id}: {e}", exc_info=True)
        raise ApiError(500, "Failed to update language preference")
    return {"message": "Language preference updated successfully", "locale": data.locale}
