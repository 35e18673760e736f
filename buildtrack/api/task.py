#buildtrack/api/task.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from buildtrack.schemas.task import TaskCreate, TaskRead, TaskUpdate
from buildtrack.crud.task import (
    create_task,
    get_all_tasks,
    update_task,
    soft_delete_task,
)
from buildtrack.dependencies import get_db, get_current_active_user, get_task_for_user_or_404_403
from buildtrack.schemas.response import SuccessResponse
from buildtrack.crud.project import get_project
from buildtrack.models.user import User as UserModel
from buildtrack.models.project import Project as ProjectModel
from buildtrack.models.task import Task as TaskModel, TaskStatus, TaskPriority, TaskCategory
from buildtrack.core.exceptions import ProjectNotFound, TaskValidationError

logger = logging.getLogger("BuildTrack.TasksAPI")

router = APIRouter(prefix="/tasks", tags=["Tasks"])

def _check_project_permission_and_get_project(db: Session, project_id: int, current_user: UserModel) -> ProjectModel:
    try:
        project = get_project(db, project_id)
    except ProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Project with id {project_id} not found.")
    if not current_user.is_superuser and project.owner_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions for the parent project."
        )
    return project

@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_new_task(
    data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    _check_project_permission_and_get_project(db, data.project_id, current_user)
    try:
        return create_task(db, data.model_dump())
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating task: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred while creating the task.")

@router.get("/", response_model=List[TaskRead])
def list_tasks(
    project_id: Optional[int] = Query(None),
    task_status: Optional[TaskStatus] = Query(None),
    priority: Optional[TaskPriority] = Query(None),
    category: Optional[TaskCategory] = Query(None),
    assignee_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    due_before: Optional[date] = Query(None),
    due_after: Optional[date] = Query(None),
    show_archived: bool = Query(False),
    sort_by: Optional[str] = Query("due_date"),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Tasks across the user's projects, optionally narrowed to one project.
    """
    if project_id is not None:
        _check_project_permission_and_get_project(db, project_id, current_user)
    filters = {
        "project_id": project_id,
        "status": task_status,
        "priority": priority,
        "category": category,
        "assignee_id": assignee_id,
        "search": search,
        "due_before": due_before,
        "due_after": due_after,
        "show_archived": show_archived,
    }
    filters = {k: v for k, v in filters.items() if v is not None}
    try:
        return get_all_tasks(db, current_user=current_user, filters=filters, sort_by=sort_by)
    except Exception as e:
        logger.error(f"Failed to list tasks: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch tasks.")

@router.get("/{task_id}", response_model=TaskRead)
def get_one_task(task: TaskModel = Depends(get_task_for_user_or_404_403)):
    return task

@router.patch("/{task_id}", response_model=TaskRead)
def update_one_task(
    data: TaskUpdate,
    task: TaskModel = Depends(get_task_for_user_or_404_403),
    db: Session = Depends(get_db),
):
    try:
        return update_task(db, task.id, data.model_dump(exclude_unset=True))
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to update task {task.id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred during task update.")

@router.delete("/{task_id}", response_model=SuccessResponse)
def delete_task(
    task: TaskModel = Depends(get_task_for_user_or_404_403),
    db: Session = Depends(get_db),
):
    try:
        soft_delete_task(db, task.id)
        return SuccessResponse(result=task.id, detail="Task archived")
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to archive task {task.id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred during task deletion.")
