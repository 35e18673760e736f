#buildtrack/services/dashboard_client.py
"""
Client-side dashboard editor.

Holds one user's dashboard and its desktop layout and talks to the
``/api/dashboard`` routes over an ``httpx.Client``. Every mutation is applied
to local state first and then the whole dashboard is POSTed. A failed POST
is recorded in ``error`` and logged; local state stays ahead of the server
and nothing is retried.
"""
import copy
import time
import logging
from typing import Any, Dict, List, Optional

import httpx

from buildtrack.core.widget_catalog import (
    DEFAULT_DASHBOARD_ID,
    build_default_dashboard,
    get_definition,
    layout_item,
)

logger = logging.getLogger("BuildTrack.DashboardEditor")

DASHBOARD_PATH = "/api/dashboard"

def _millis() -> int:
    return int(time.time() * 1000)

class DashboardEditor:
    def __init__(self, client: httpx.Client, headers: Optional[Dict[str, str]] = None):
        self.client = client
        self.headers = headers or {}
        self.dashboard: Optional[Dict[str, Any]] = None
        self.current_layout: List[Dict[str, Any]] = []
        self.is_edit_mode: bool = False
        self.is_loading: bool = False
        self.error: Optional[str] = None

    # --- server round trips ---

    def _post(self, dashboard: Dict[str, Any]) -> bool:
        try:
            response = self.client.post(DASHBOARD_PATH, json={"dashboard": dashboard}, headers=self.headers)
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            self.error = f"Failed to save dashboard: {e}"
            logger.error(f"Error saving dashboard '{dashboard.get('id')}': {e}")
            return False

    def load_dashboard(self, dashboard_id: str = DEFAULT_DASHBOARD_ID) -> Optional[Dict[str, Any]]:
        """
        Fetch a dashboard. When the server has none, the default dashboard is
        built from the widget catalog and saved.
        """
        self.is_loading = True
        self.error = None
        try:
            response = self.client.get(DASHBOARD_PATH, params={"id": dashboard_id}, headers=self.headers)
            response.raise_for_status()
            dashboard = response.json().get("dashboard")
        except httpx.HTTPError as e:
            self.error = f"Failed to load dashboard: {e}"
            logger.error(f"Error loading dashboard '{dashboard_id}': {e}")
            return None
        finally:
            self.is_loading = False

        if dashboard is None:
            dashboard = build_default_dashboard()
            if dashboard_id != DEFAULT_DASHBOARD_ID:
                dashboard["id"] = dashboard_id
            self.dashboard = dashboard
            self.current_layout = list(dashboard["layouts"]["desktop"])
            self._post(dashboard)
            logger.info(f"Created dashboard '{dashboard_id}' from the widget catalog")
        else:
            self.dashboard = dashboard
            self.current_layout = list((dashboard.get("layouts") or {}).get("desktop") or [])
        return self.dashboard

    def save_dashboard(self) -> bool:
        if not self.dashboard:
            return False
        layouts = dict(self.dashboard.get("layouts") or {})
        layouts["desktop"] = list(self.current_layout)
        self.dashboard = {**self.dashboard, "layouts": layouts}
        return self._post(copy.deepcopy(self.dashboard))

    # --- local mutations ---

    def add_widget(self, widget_type: Any) -> Optional[Dict[str, Any]]:
        """
        Add a catalog widget at the bottom of the grid. Unknown types are ignored.
        """
        if not self.dashboard:
            return None
        widget = get_definition(widget_type)
        if widget is None:
            return None
        widget["id"] = f"{widget['type'].lower()}-{_millis()}"
        widget["isVisible"] = True
        bottom = max((item.get("y", 0) + item.get("h", 0) for item in self.current_layout), default=0)

        self.dashboard = {**self.dashboard, "widgets": [*self.dashboard.get("widgets", []), widget]}
        self.current_layout = [*self.current_layout, layout_item(widget, 0, bottom)]
        self.save_dashboard()
        return widget

    def remove_widget(self, widget_id: str) -> None:
        if not self.dashboard:
            return
        self.dashboard = {
            **self.dashboard,
            "widgets": [w for w in self.dashboard.get("widgets", []) if w.get("id") != widget_id],
        }
        self.current_layout = [item for item in self.current_layout if item.get("i") != widget_id]
        self.save_dashboard()

    def update_widget_layout(self, layouts: List[Dict[str, Any]]) -> None:
        self.current_layout = list(layouts)
        self.save_dashboard()

    def update_widget_settings(self, widget_id: str, settings: Dict[str, Any]) -> None:
        if not self.dashboard:
            return
        self.dashboard = {
            **self.dashboard,
            "widgets": [
                {**w, "settings": {**(w.get("settings") or {}), **settings}} if w.get("id") == widget_id else w
                for w in self.dashboard.get("widgets", [])
            ],
        }
        self.save_dashboard()

    def toggle_widget_visibility(self, widget_id: str) -> None:
        if not self.dashboard:
            return
        self.dashboard = {
            **self.dashboard,
            "widgets": [
                {**w, "isVisible": not w.get("isVisible", True)} if w.get("id") == widget_id else w
                for w in self.dashboard.get("widgets", [])
            ],
        }
        self.save_dashboard()

    def toggle_edit_mode(self) -> bool:
        self.is_edit_mode = not self.is_edit_mode
        return self.is_edit_mode

    def create_dashboard(self, name: str) -> Optional[str]:
        """
        Store a new empty dashboard and return its id, or None if the POST failed.
        The editor keeps its current dashboard.
        """
        dashboard = {
            "id": f"dashboard-{_millis()}",
            "name": name,
            "isDefault": False,
            "widgets": [],
            "layouts": {"desktop": [], "tablet": [], "mobile": []},
        }
        if not self._post(dashboard):
            return None
        return dashboard["id"]
