#buildtrack/core/widget_catalog.py
import copy
import enum
from typing import Any, Dict, List, Optional

# === TYPES ===

class WidgetType(str, enum.Enum):
    ACTIVE_PROJECTS = "ACTIVE_PROJECTS"
    PROJECT_TIMELINE = "PROJECT_TIMELINE"
    PROJECT_HEALTH = "PROJECT_HEALTH"
    MY_TASKS = "MY_TASKS"
    TEAM_TASKS = "TEAM_TASKS"
    CRITICAL_PATH = "CRITICAL_PATH"
    PROGRESS_REPORTS = "PROGRESS_REPORTS"
    FINANCIAL_DASHBOARD = "FINANCIAL_DASHBOARD"
    TEAM_PERFORMANCE = "TEAM_PERFORMANCE"
    NOTIFICATION_CENTER = "NOTIFICATION_CENTER"
    ANALYTICS = "ANALYTICS"
    CUSTOM = "CUSTOM"

class WidgetSize(str, enum.Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"

GRID_WIDTHS: Dict[str, int] = {
    WidgetSize.SMALL.value: 3,
    WidgetSize.MEDIUM.value: 6,
    WidgetSize.LARGE.value: 12,
    WidgetSize.EXTRA_LARGE.value: 12,
}
GRID_HEIGHT = 4
MIN_WIDTH = 3
MIN_HEIGHT = 2

DEFAULT_DASHBOARD_ID = "default"
DEFAULT_DASHBOARD_NAME = "Default Dashboard"
DEFAULT_WIDGET_COUNT = 4

# === CATALOG ===

def _definition(widget_id: str, widget_type: WidgetType, size: WidgetSize, title: str) -> Dict[str, Any]:
    return {
        "id": widget_id,
        "type": widget_type.value,
        "size": size.value,
        "title": title,
        "isVisible": True,
        "settings": {},
    }

WIDGET_CATALOG: List[Dict[str, Any]] = [
    _definition("active-projects", WidgetType.ACTIVE_PROJECTS, WidgetSize.MEDIUM, "Active Projects"),
    _definition("project-timeline", WidgetType.PROJECT_TIMELINE, WidgetSize.LARGE, "Project Timeline"),
    _definition("project-health", WidgetType.PROJECT_HEALTH, WidgetSize.MEDIUM, "Project Health"),
    _definition("my-tasks", WidgetType.MY_TASKS, WidgetSize.MEDIUM, "My Tasks"),
    _definition("team-tasks", WidgetType.TEAM_TASKS, WidgetSize.MEDIUM, "Team Tasks"),
    _definition("critical-path", WidgetType.CRITICAL_PATH, WidgetSize.SMALL, "Critical Path Tasks"),
    _definition("progress-reports", WidgetType.PROGRESS_REPORTS, WidgetSize.MEDIUM, "Progress Reports"),
    _definition("financial-dashboard", WidgetType.FINANCIAL_DASHBOARD, WidgetSize.MEDIUM, "Financial Dashboard"),
    _definition("team-performance", WidgetType.TEAM_PERFORMANCE, WidgetSize.SMALL, "Team Performance"),
    _definition("notification-center", WidgetType.NOTIFICATION_CENTER, WidgetSize.SMALL, "Notifications"),
]

# === HELPERS ===

def get_catalog() -> List[Dict[str, Any]]:
    """
    Copy of the catalog; callers are free to mutate it.
    """
    return copy.deepcopy(WIDGET_CATALOG)

def get_definition(widget_type: Any) -> Optional[Dict[str, Any]]:
    value = widget_type.value if isinstance(widget_type, WidgetType) else str(widget_type)
    for definition in WIDGET_CATALOG:
        if definition["type"] == value:
            return copy.deepcopy(definition)
    return None

def grid_width(size: Any) -> int:
    value = size.value if isinstance(size, WidgetSize) else str(size)
    return GRID_WIDTHS.get(value, GRID_WIDTHS[WidgetSize.MEDIUM.value])

def layout_item(widget: Dict[str, Any], x: int, y: int) -> Dict[str, Any]:
    return {
        "i": widget["id"],
        "x": x,
        "y": y,
        "w": grid_width(widget.get("size")),
        "h": GRID_HEIGHT,
        "minW": MIN_WIDTH,
        "minH": MIN_HEIGHT,
    }

def build_default_dashboard() -> Dict[str, Any]:
    """
    The dashboard a user gets before saving one: the first four catalog
    widgets in a two-column desktop grid, empty tablet and mobile layouts.
    """
    widgets = get_catalog()[:DEFAULT_WIDGET_COUNT]
    desktop = [layout_item(w, (i % 2) * 6, (i // 2) * GRID_HEIGHT) for i, w in enumerate(widgets)]
    return {
        "id": DEFAULT_DASHBOARD_ID,
        "name": DEFAULT_DASHBOARD_NAME,
        "isDefault": True,
        "widgets": widgets,
        "layouts": {"desktop": desktop, "tablet": [], "mobile": []},
    }
