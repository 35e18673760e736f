#buildtrack/api/report.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from buildtrack.crud.report import task_completion_report, project_performance_report
from buildtrack.dependencies import get_db, get_current_active_user
from buildtrack.models.user import User as UserModel

logger = logging.getLogger("BuildTrack.ReportsAPI")

router = APIRouter(prefix="/api/reports", tags=["Reports"])

@router.get("/task-completion")
def task_completion(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Pie chart data: Completed / In Progress / Not Started / Delayed.
    """
    try:
        return task_completion_report(db, current_user)
    except Exception as e:
        logger.error(f"Failed to build task completion report: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to build report.")

@router.get("/project-performance")
def project_performance(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Bar chart data for the last six months.
    """
    try:
        return project_performance_report(db, current_user)
    except Exception as e:
        logger.error(f"Failed to build project performance report: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to build report.")
