#buildtrack/api/dashboard.py
from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from typing import Any, List
import logging

from buildtrack.schemas.dashboard import (
    DashboardSaveRequest,
    DashboardResponse,
    DashboardSaveResponse,
    DashboardListResponse,
    WidgetDefinitionRead,
)
from buildtrack.crud import dashboard as crud_dashboard
from buildtrack.core.exceptions import (
    ApiError,
    DashboardValidationError,
    DashboardNotFound,
)
from buildtrack.core.widget_catalog import get_catalog
from buildtrack.dependencies import get_db, require_api_user
from buildtrack.models.user import User as DBUser

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])
widgets_router = APIRouter(prefix="/api/widgets", tags=["Dashboard"])
logger = logging.getLogger("BuildTrack.DashboardAPI")

def _internal_error() -> ApiError:
    return ApiError(500, "Internal server error")

@router.get("", response_model=DashboardResponse)
def read_dashboard(
    id: str = Query(crud_dashboard.DEFAULT_DASHBOARD_ID),
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    """
    The stored dashboard with this id, or {"dashboard": null}.
    """
    try:
        return DashboardResponse(dashboard=crud_dashboard.get_dashboard(db, current_user.id, id))
    except Exception as e:
        logger.error(f"Error fetching dashboard '{id}' for user {current_user.id}: {e}", exc_info=True)
        raise _internal_error()

@router.post("", response_model=DashboardSaveResponse)
def save_dashboard(
    data: Any = Body(None),
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    """
    Store the whole dashboard document, replacing any with the same id.
    Concurrent saves are not reconciled; the last one wins.
    """
    payload = DashboardSaveRequest.model_validate(data) if isinstance(data, dict) else DashboardSaveRequest()
    try:
        dashboard_id = crud_dashboard.save_dashboard(db, current_user.id, payload.dashboard)
        return DashboardSaveResponse(success=True, dashboardId=dashboard_id)
    except DashboardValidationError as e:
        raise ApiError(400, str(e))
    except Exception as e:
        logger.error(f"Error saving dashboard for user {current_user.id}: {e}", exc_info=True)
        raise _internal_error()

@router.delete("")
def delete_dashboard(
    id: str = Query(...),
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    try:
        crud_dashboard.delete_dashboard(db, current_user.id, id)
        return {"success": True, "dashboardId": id}
    except DashboardNotFound as e:
        raise ApiError(404, "Not Found", str(e))
    except Exception as e:
        logger.error(f"Error deleting dashboard '{id}' for user {current_user.id}: {e}", exc_info=True)
        raise _internal_error()

@router.get("/list", response_model=DashboardListResponse)
def list_dashboards(
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(require_api_user),
):
    try:
        return DashboardListResponse(dashboards=crud_dashboard.list_dashboards(db, current_user.id))
    except Exception as e:
        logger.error(f"Error listing dashboards for user {current_user.id}: {e}", exc_info=True)
        raise _internal_error()

@widgets_router.get("/catalog", response_model=List[WidgetDefinitionRead])
def widget_catalog():
    return get_catalog()
