#buildtrack/schemas/profile.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime

class CamelModel(BaseModel):
    """
    Base for payloads exchanged with the web client, which speaks camelCase.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class OrganizationSummary(CamelModel):
    id: int
    name: str

class ProjectSummary(CamelModel):
    id: int
    name: str
    thumbnail_url: Optional[str] = None

class ProfileRead(CamelModel):
    """
    ProfileRead: full profile of the current user.
    """
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None

    job_title: Optional[str] = None
    department: Optional[str] = None
    skills: Optional[List[Any]] = None
    certifications: Optional[List[Any]] = None

    preferred_contact_method: Optional[str] = None
    timezone: Optional[str] = None
    language: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None

    dashboard_layout: Optional[Dict[str, Any]] = None
    recent_projects: Optional[List[Any]] = None
    favorite_tools: Optional[List[Any]] = None

    offline_access: bool = False
    data_usage_preferences: Optional[Dict[str, Any]] = None

    login_streak: int = 0
    onboarding_status: Optional[str] = None

    organization: Optional[OrganizationSummary] = None
    role: Optional[str] = None
    last_active_project: Optional[ProjectSummary] = None

class ProfileUpdate(CamelModel):
    """
    ProfileUpdate: every field optional; only the provided ones are written.
    Unknown keys are ignored.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone_number: Optional[str] = None

    job_title: Optional[str] = None
    department: Optional[str] = None
    skills: Optional[List[Any]] = None
    certifications: Optional[List[Any]] = None

    preferred_contact_method: Optional[str] = None
    timezone: Optional[str] = None
    language: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None

    dashboard_layout: Optional[Dict[str, Any]] = None
    recent_projects: Optional[List[Any]] = None
    favorite_tools: Optional[List[Any]] = None

    offline_access: Optional[bool] = None
    data_usage_preferences: Optional[Dict[str, Any]] = None

    last_active_project_id: Optional[int] = None
    onboarding_status: Optional[str] = None

class ProfileResponse(BaseModel):
    profile: ProfileRead
    message: str

class PreferencesResponse(BaseModel):
    preferences: Dict[str, Any]
    message: str

class DeviceTokenRegister(BaseModel):
    token: Optional[str] = None
    device: Optional[str] = None

class DeviceTokenResponse(BaseModel):
    message: str
    deviceCount: int

class DashboardLayoutResponse(BaseModel):
    dashboardLayout: Dict[str, Any]
    recentProjects: List[Any]
    favoriteTools: List[Any]
    message: str

class DashboardLayoutUpdate(BaseModel):
    layout: Optional[Any] = None
    widgets: Optional[Any] = None

class LanguagePreference(BaseModel):
    locale: Optional[str] = None
