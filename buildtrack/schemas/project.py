#buildtrack/schemas/project.py
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict, Any
from datetime import date, datetime

from buildtrack.models.project import ProjectType, ProjectStatus, ProjectPriority

class ProjectBase(BaseModel):
    """
    ProjectBase: fields shared by create/read.
    """
    name: str = Field(..., examples=["Riverside Office Renovation"])
    description: Optional[str] = Field("", examples=["Full interior remodel of floors 2-4"])
    project_type: ProjectType = Field(ProjectType.OTHER)
    status: ProjectStatus = Field(ProjectStatus.PLANNING)
    priority: ProjectPriority = Field(ProjectPriority.MEDIUM)
    start_date: Optional[date] = Field(None, examples=["2026-03-01"])
    end_date: Optional[date] = Field(None, examples=["2026-11-30"])
    budget: Optional[float] = Field(None, ge=0, examples=[1250000.0])
    location: Optional[Dict[str, Any]] = Field(None, description="Address and coordinates")
    tags: List[str] = Field(default_factory=list)
    thumbnail_url: Optional[str] = None
    organization_id: Optional[int] = None

class ProjectCreate(ProjectBase):
    """
    ProjectCreate: owner_id is set from the current user.
    """

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self

class ProjectUpdate(BaseModel):
    """
    ProjectUpdate: all fields optional.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    project_type: Optional[ProjectType] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[ProjectPriority] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = Field(None, ge=0)
    location: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    thumbnail_url: Optional[str] = None
    organization_id: Optional[int] = None

class ProjectShort(BaseModel):
    id: int
    name: str
    status: str
    project_type: str
    owner_id: Optional[int] = None

    class Config:
        from_attributes = True

class ProjectRead(ProjectBase):
    id: int
    owner_id: Optional[int] = None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ProjectTypeSuggestionRequest(BaseModel):
    name: str = ""
    description: str = ""

class ProjectTypeSuggestion(BaseModel):
    type: ProjectType
    confidence: float
    reason: str

class ProjectTypeSuggestionResponse(BaseModel):
    shouldSuggest: bool
    suggestions: List[ProjectTypeSuggestion]
