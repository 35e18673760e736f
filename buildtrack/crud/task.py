#buildtrack/crud/task.py
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from enum import Enum
from typing import List, Dict, Any, Optional
import logging

from buildtrack.models.task import Task, TaskStatus
from buildtrack.models.project import Project
from buildtrack.models.user import User as UserModel
from buildtrack.core.exceptions import (
    TaskValidationError,
    TaskNotFound,
    ProjectNotFound,
)

logger = logging.getLogger("BuildTrack.Tasks")

UPDATABLE_FIELDS = [
    "title", "description", "status", "priority", "category",
    "start_date", "due_date", "estimated_hours", "assignee_id",
]

def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value

def _check_dates(start_date, due_date) -> None:
    if start_date and due_date and due_date < start_date:
        raise TaskValidationError("Due date must be after start date.")

def _apply_completion(task: Task) -> None:
    if task.status == TaskStatus.COMPLETED.value:
        if task.completed_at is None:
            task.completed_at = datetime.now(timezone.utc)
    else:
        task.completed_at = None

def create_task(db: Session, data: dict) -> Task:
    """
    Create a task inside an existing, non-deleted project.
    """
    title = (data.get("title") or "").strip()
    if not title:
        raise TaskValidationError("Task title is required.")
    project_id = data.get("project_id")
    project = db.query(Project).filter(Project.id == project_id, Project.is_deleted == False).first()
    if not project:
        raise ProjectNotFound(f"Project with id={project_id} not found (or is deleted).")
    _check_dates(data.get("start_date"), data.get("due_date"))

    task = Task(
        project_id=project.id,
        title=title,
        description=data.get("description") or "",
        status=_plain(data.get("status")) or TaskStatus.TODO.value,
        priority=_plain(data.get("priority")) or "medium",
        category=_plain(data.get("category")) or "other",
        start_date=data.get("start_date"),
        due_date=data.get("due_date"),
        estimated_hours=data.get("estimated_hours"),
        assignee_id=data.get("assignee_id"),
        is_deleted=False,
    )
    _apply_completion(task)
    db.add(task)
    try:
        db.commit()
        db.refresh(task)
        logger.info(f"Created task {task.id} for project {task.project_id}")
        return task
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create task: {e}")
        raise TaskValidationError("Database error while creating task.")

def get_task(db: Session, task_id: int, include_deleted: bool = False) -> Task:
    query = db.query(Task).filter(Task.id == task_id)
    if not include_deleted:
        query = query.filter(Task.is_deleted == False)
    task = query.first()
    if not task:
        raise TaskNotFound(f"Task {task_id} not found{' (or is deleted)' if not include_deleted else ''}.")
    return task

def get_all_tasks(
    db: Session,
    current_user: UserModel,
    filters: Optional[Dict[str, Any]] = None,
    sort_by: str = "due_date",
) -> List[Task]:
    """
    Tasks in projects the user owns (all tasks for superusers), filtered.
    """
    query = db.query(Task).join(Project, Task.project_id == Project.id)
    filters = filters or {}

    if not current_user.is_superuser:
        query = query.filter(Project.owner_id == current_user.id)
    if not filters.get("show_archived", False):
        query = query.filter(Task.is_deleted == False, Project.is_deleted == False)
    if "project_id" in filters:
        query = query.filter(Task.project_id == filters["project_id"])
    if "status" in filters:
        query = query.filter(Task.status == _plain(filters["status"]))
    if "priority" in filters:
        query = query.filter(Task.priority == _plain(filters["priority"]))
    if "category" in filters:
        query = query.filter(Task.category == _plain(filters["category"]))
    if "assignee_id" in filters:
        query = query.filter(Task.assignee_id == filters["assignee_id"])
    if "search" in filters:
        val = f"%{filters['search']}%"
        query = query.filter(Task.title.ilike(val) | Task.description.ilike(val))
    if "due_before" in filters:
        query = query.filter(Task.due_date <= filters["due_before"])
    if "due_after" in filters:
        query = query.filter(Task.due_date >= filters["due_after"])

    if sort_by in ("title", "created_at", "priority", "start_date"):
        query = query.order_by(getattr(Task, sort_by).asc(), Task.id.asc())
    else:
        query = query.order_by(Task.due_date.asc(), Task.id.asc())
    return query.all()

def update_task(db: Session, task_id: int, data: dict) -> Task:
    """
    Update a task. Any status may follow any other; completed_at tracks
    whether the task currently sits in the completed status.
    """
    task = get_task(db, task_id)
    changes = {field: _plain(data[field]) for field in UPDATABLE_FIELDS if field in data}
    if changes.get("title"):
        changes["title"] = changes["title"].strip()

    # validate against the merged values; the instance stays untouched on failure
    if not changes.get("title", task.title):
        raise TaskValidationError("Task title is required.")
    _check_dates(changes.get("start_date", task.start_date), changes.get("due_date", task.due_date))

    for field, value in changes.items():
        setattr(task, field, value)
    _apply_completion(task)
    task.updated_at = datetime.now(timezone.utc)

    try:
        db.commit()
        db.refresh(task)
        logger.info(f"Updated task {task.id} fields: {sorted(k for k in data if k in UPDATABLE_FIELDS)}")
        return task
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update task: {e}")
        raise TaskValidationError("Database error while updating task.")

def soft_delete_task(db: Session, task_id: int) -> Task:
    task = get_task(db, task_id, include_deleted=True)
    if task.is_deleted:
        raise TaskValidationError("Task already archived.")
    task.is_deleted = True
    task.deleted_at = datetime.now(timezone.utc)
    try:
        db.commit()
        db.refresh(task)
        logger.info(f"Archived task {task_id}")
        return task
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to archive task: {e}")
        raise TaskValidationError("Database error while archiving task.")

def restore_task(db: Session, task_id: int) -> Task:
    task = get_task(db, task_id, include_deleted=True)
    if not task.is_deleted:
        raise TaskValidationError(f"Task with id={task_id} is not archived/deleted.")
    task.is_deleted = False
    task.deleted_at = None
    try:
        db.commit()
        db.refresh(task)
        logger.info(f"Restored task {task_id}")
        return task
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to restore task: {e}")
        raise TaskValidationError("Database error while restoring task.")
