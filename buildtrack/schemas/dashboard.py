#buildtrack/schemas/dashboard.py
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

class DashboardSaveRequest(BaseModel):
    """
    Body of POST /api/dashboard. The dashboard document is stored as given;
    only its id is checked.
    """
    dashboard: Optional[Any] = None

class DashboardResponse(BaseModel):
    dashboard: Optional[Dict[str, Any]] = None

class DashboardSaveResponse(BaseModel):
    success: bool = True
    dashboardId: Any

class DashboardSummary(BaseModel):
    id: Any
    name: Optional[str] = None
    isDefault: bool = False

class DashboardListResponse(BaseModel):
    dashboards: List[DashboardSummary] = Field(default_factory=list)

class WidgetDefinitionRead(BaseModel):
    id: str
    type: str
    size: str
    title: str
    isVisible: bool = True
    settings: Dict[str, Any] = Field(default_factory=dict)
