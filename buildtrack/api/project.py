#buildtrack/api/project.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from buildtrack.schemas.project import (
    ProjectCreate, ProjectRead, ProjectUpdate, ProjectShort,
    ProjectTypeSuggestionRequest, ProjectTypeSuggestionResponse,
)
from buildtrack.crud.project import (
    create_project,
    get_all_projects,
    update_project,
    soft_delete_project,
    restore_project,
)
from buildtrack.services.suggestions import suggest_project_type, should_suggest_project_type
from buildtrack.dependencies import (
    get_db, get_current_active_user,
    get_project_for_user_or_404_403, get_deleted_project_for_user_or_404_403
)
from buildtrack.schemas.response import SuccessResponse
from buildtrack.core.exceptions import ProjectValidationError, DuplicateProjectName
from buildtrack.models.user import User as DBUser
from buildtrack.models.project import Project as ProjectModel, ProjectStatus, ProjectType, ProjectPriority

import logging

router = APIRouter(prefix="/projects", tags=["Projects"])
suggestions_router = APIRouter(prefix="/api/projects", tags=["Projects"])
logger = logging.getLogger("BuildTrack.ProjectsAPI")

@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_new_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(get_current_active_user)
):
    """
    Create a project owned by the current user.
    """
    payload = data.model_dump()
    payload["owner_id"] = current_user.id
    if payload.get("organization_id") is None:
        payload["organization_id"] = current_user.organization_id
    try:
        return create_project(db, payload)
    except (ProjectValidationError, DuplicateProjectName) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error in create_new_project: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred while creating the project.")

@router.get("/{project_id}", response_model=ProjectRead)
def get_one_project(
    project: ProjectModel = Depends(get_project_for_user_or_404_403)
):
    return project

@router.get("/", response_model=List[ProjectShort])
def list_projects(
    project_status: Optional[ProjectStatus] = Query(None),
    project_type: Optional[ProjectType] = Query(None),
    priority: Optional[ProjectPriority] = Query(None),
    tag: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    end_before: Optional[date] = Query(None),
    show_archived: bool = Query(False),
    sort_by: Optional[str] = Query("created_at"),
    db: Session = Depends(get_db),
    current_user: DBUser = Depends(get_current_active_user)
):
    filters = {
        "status": project_status,
        "project_type": project_type,
        "priority": priority,
        "tag": tag,
        "search": search,
        "end_before": end_before,
        "show_archived": show_archived,
    }
    filters = {k: v for k, v in filters.items() if v is not None}
    try:
        return get_all_projects(db, current_user=current_user, filters=filters, sort_by=sort_by)
    except Exception as e:
        logger.error(f"Failed to list projects: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch projects.")

@router.patch("/{project_id}", response_model=ProjectRead)
def update_one_project(
    data: ProjectUpdate,
    project_to_update: ProjectModel = Depends(get_project_for_user_or_404_403),
    db: Session = Depends(get_db)
):
    try:
        return update_project(db, project_to_update.id, data.model_dump(exclude_unset=True))
    except (ProjectValidationError, DuplicateProjectName) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to update project {project_to_update.id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred during project update.")

@router.delete("/{project_id}", response_model=SuccessResponse)
def delete_project(
    project_to_delete: ProjectModel = Depends(get_deleted_project_for_user_or_404_403),
    db: Session = Depends(get_db)
):
    """
    Archive (soft-delete) a project.
    """
    try:
        soft_delete_project(db, project_to_delete.id)
        return SuccessResponse(result=project_to_delete.id, detail="Project archived")
    except ProjectValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to soft-delete project {project_to_delete.id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred during project deletion.")

@router.post("/{project_id}/restore", response_model=SuccessResponse)
def restore_deleted_project(
    project_to_restore: ProjectModel = Depends(get_deleted_project_for_user_or_404_403),
    db: Session = Depends(get_db)
):
    try:
        restored = restore_project(db, project_to_restore.id)
        return SuccessResponse(result=restored.id, detail="Project restored")
    except ProjectValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to restore project {project_to_restore.id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred during project restoration.")

@suggestions_router.post("/suggest-type", response_model=ProjectTypeSuggestionResponse)
def suggest_type(
    data: ProjectTypeSuggestionRequest,
    current_user: DBUser = Depends(get_current_active_user)
):
    """
    Keyword-based project type suggestions for a draft name and description.
    """
    return ProjectTypeSuggestionResponse(
        shouldSuggest=should_suggest_project_type(data.name, data.description),
        suggestions=suggest_project_type(data.name, data.description),
    )
