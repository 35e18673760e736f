# buildtrack/crud/project.py
from sqlalchemy.orm import Session
from sqlalchemy import cast, String as SQLString
from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Optional, List, Dict, Any

from buildtrack.models.project import Project, ProjectStatus
from buildtrack.models.user import User as UserModel
from buildtrack.core.exceptions import (
    ProjectNotFound,
    DuplicateProjectName,
    ProjectValidationError,
)

logger = logging.getLogger("BuildTrack.Projects")

UPDATABLE_FIELDS = [
    "name", "description", "project_type", "status", "priority",
    "start_date", "end_date", "budget", "location", "tags",
    "thumbnail_url", "organization_id",
]

def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value

def _check_dates(start_date, end_date) -> None:
    if start_date and end_date and end_date < start_date:
        raise ProjectValidationError("End date must be after start date.")

def create_project(db: Session, data: dict) -> Project:
    """
    Create a project. Names are unique among non-deleted projects.
    """
    name = (data.get("name") or "").strip()
    if not name:
        raise ProjectValidationError("Project name is required.")
    if db.query(Project).filter(Project.name == name, Project.is_deleted == False).first():
        raise DuplicateProjectName(f"Project with name '{name}' already exists.")
    _check_dates(data.get("start_date"), data.get("end_date"))

    project = Project(
        name=name,
        description=data.get("description") or "",
        project_type=_plain(data.get("project_type")) or "OTHER",
        status=_plain(data.get("status")) or ProjectStatus.PLANNING.value,
        priority=_plain(data.get("priority")) or "MEDIUM",
        start_date=data.get("start_date"),
        end_date=data.get("end_date"),
        budget=data.get("budget"),
        location=data.get("location"),
        tags=data.get("tags") or [],
        thumbnail_url=data.get("thumbnail_url"),
        owner_id=data.get("owner_id"),
        organization_id=data.get("organization_id"),
        is_deleted=False,
    )
    db.add(project)
    try:
        db.commit()
        db.refresh(project)
        logger.info(f"Created project '{project.name}' (ID: {project.id})")
        return project
    except Exception as e:
        db.rollback()
        logger.error(f"Exception during save: {e}")
        raise ProjectValidationError("Database error while creating project.")

def get_all_projects(
    db: Session,
    current_user: UserModel,
    filters: Optional[Dict[str, Any]] = None,
    sort_by: str = "created_at"
) -> List[Project]:
    """
    Projects owned by the user (all projects for superusers), filtered.
    """
    query = db.query(Project)
    filters = filters or {}

    if not current_user.is_superuser:
        query = query.filter(Project.owner_id == current_user.id)
    if not filters.get("show_archived", False):
        query = query.filter(Project.is_deleted == False)
    if "status" in filters:
        query = query.filter(Project.status == _plain(filters["status"]))
    if "project_type" in filters:
        query = query.filter(Project.project_type == _plain(filters["project_type"]))
    if "priority" in filters:
        query = query.filter(Project.priority == _plain(filters["priority"]))
    if "search" in filters:
        search = f"%{filters['search']}%"
        query = query.filter(
            (Project.name.ilike(search)) | (Project.description.ilike(search))
        )
    if "tag" in filters:
        query = query.filter(cast(Project.tags, SQLString).like(f'%"{filters["tag"]}"%'))
    if "end_before" in filters:
        query = query.filter(Project.end_date <= filters["end_before"])

    if sort_by in ("name", "start_date", "end_date", "priority"):
        query = query.order_by(getattr(Project, sort_by).asc())
    else:
        query = query.order_by(Project.created_at.desc(), Project.id.desc())
    return query.all()

def get_project(db: Session, project_id: int, include_deleted: bool = False) -> Project:
    query = db.query(Project).filter(Project.id == project_id)
    if not include_deleted:
        query = query.filter(Project.is_deleted == False)
    project = query.first()
    if not project:
        raise ProjectNotFound(f"Project with id={project_id} not found{' (or is deleted)' if not include_deleted else ''}.")
    return project

def update_project(db: Session, project_id: int, data: dict) -> Project:
    """
    Update a project. Status changes are not restricted.
    """
    project = get_project(db, project_id)
    changes = {field: _plain(data[field]) for field in UPDATABLE_FIELDS if field in data}

    # validate against the merged values; the instance stays untouched on failure
    name = changes.get("name", project.name)
    if not (name or "").strip():
        raise ProjectValidationError("Project name is required.")
    _check_dates(changes.get("start_date", project.start_date), changes.get("end_date", project.end_date))
    if "name" in changes:
        clash = db.query(Project).filter(
            Project.name == name,
            Project.id != project.id,
            Project.is_deleted == False,
        ).first()
        if clash:
            raise DuplicateProjectName(f"Project with name '{name}' already exists.")

    for field, value in changes.items():
        setattr(project, field, value)
    project.updated_at = datetime.now(timezone.utc)
    try:
        db.commit()
        db.refresh(project)
        logger.info(f"Updated project {project.id} fields: {sorted(k for k in data if k in UPDATABLE_FIELDS)}")
        return project
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update project: {e}")
        raise ProjectValidationError("Database error while updating project.")

def soft_delete_project(db: Session, project_id: int) -> Project:
    project = get_project(db, project_id, include_deleted=True)
    if project.is_deleted:
        raise ProjectValidationError("Project already archived.")
    project.is_deleted = True
    project.deleted_at = datetime.now(timezone.utc)
    try:
        db.commit()
        db.refresh(project)
        logger.info(f"Soft-deleted project {project.id}")
        return project
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to archive project: {e}")
        raise ProjectValidationError("Database error while archiving project.")

def restore_project(db: Session, project_id: int) -> Project:
    project = get_project(db, project_id, include_deleted=True)
    if not project.is_deleted:
        raise ProjectValidationError(f"Project with id={project_id} is not archived/deleted.")
    project.is_deleted = False
    project.deleted_at = None
    try:
        db.commit()
        db.refresh(project)
        logger.info(f"Restored project {project.id}")
        return project
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to restore project: {e}")
        raise ProjectValidationError("Database error while restoring project.")
