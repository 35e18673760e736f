#buildtrack/core/i18n.py
import enum
from pathlib import Path
from typing import Dict, List, Optional

from buildtrack.core.settings import settings

# === LOCALES ===

LOCALE_NAMES: Dict[str, str] = {
    "en": "English",
    "es": "Español",
    "fr": "Français",
    "pt-BR": "Português (Brasil)",
}

def supported_locales() -> List[str]:
    return list(settings.SUPPORTED_LOCALES)

def is_supported_locale(locale: Optional[str]) -> bool:
    return bool(locale) and locale in settings.SUPPORTED_LOCALES

def locale_display_name(locale: str) -> str:
    return LOCALE_NAMES.get(locale, locale)

def messages_dir() -> Path:
    if settings.MESSAGES_DIR:
        return Path(settings.MESSAGES_DIR)
    return Path(__file__).resolve().parent.parent / "i18n" / "messages"

# === NAMESPACES ===

class NamespacePriority(str, enum.Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

def _ns(name: str, priority: NamespacePriority, routes: Optional[List[str]] = None) -> Dict:
    return {"name": name, "priority": priority.value, "routes": routes or []}

TRANSLATION_NAMESPACES: List[Dict] = [
    _ns("common", NamespacePriority.CRITICAL),
    _ns("errors", NamespacePriority.HIGH),
    _ns("auth", NamespacePriority.HIGH, ["/auth"]),
    _ns("dashboard", NamespacePriority.HIGH, ["/dashboard"]),
    _ns("projects", NamespacePriority.HIGH, ["/projects", "/dashboard/projects"]),
    _ns("profile", NamespacePriority.MEDIUM, ["/profile"]),
    _ns("tasks", NamespacePriority.MEDIUM, ["/tasks", "/dashboard/tasks"]),
    _ns("notifications", NamespacePriority.MEDIUM),
    _ns("marketing", NamespacePriority.MEDIUM, ["/"]),
    _ns("materials", NamespacePriority.LOW, ["/materials"]),
    _ns("documents", NamespacePriority.LOW, ["/documents"]),
    _ns("reports", NamespacePriority.LOW, ["/reports", "/dashboard/reports"]),
    _ns("settings", NamespacePriority.LOW, ["/settings"]),
    _ns("admin", NamespacePriority.LOW, ["/admin"]),
]

NAMESPACE_NAMES: List[str] = [ns["name"] for ns in TRANSLATION_NAMESPACES]

def namespaces_by_priority(priority: NamespacePriority) -> List[str]:
    return [ns["name"] for ns in TRANSLATION_NAMESPACES if ns["priority"] == priority.value]

def namespaces_for_route(route: str) -> List[str]:
    """
    Namespaces registered for a route prefix. The root route only matches
    itself so "/" does not pull in every namespace.
    """
    matched = []
    for ns in TRANSLATION_NAMESPACES:
        for prefix in ns["routes"]:
            if (prefix == "/" and route == "/") or (prefix != "/" and route.startswith(prefix)):
                matched.append(ns["name"])
                break
    return matched
