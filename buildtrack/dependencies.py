# buildtrack/dependencies.py

from typing import Generator, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from buildtrack.core.security import oauth2_scheme, verify_access_token
from buildtrack.core.exceptions import ApiError, ProjectNotFound, TaskNotFound
from buildtrack.models.user import User
from buildtrack.models.project import Project as ProjectModel
from buildtrack.models.task import Task as TaskModel
from buildtrack.database import SessionLocal
from buildtrack.crud.user import get_user_by_username
from buildtrack.crud.project import get_project as get_project_crud
from buildtrack.crud.task import get_task as get_task_crud

# Same token source, but a missing header reaches the handler as None
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def get_db() -> Generator[Session, None, None]:
    """
    Yield a database session and close it afterwards.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def _user_from_token(db: Session, token: Optional[str]) -> Optional[User]:
    if not token:
        return None
    payload = verify_access_token(token)
    if not payload or not payload.get("sub"):
        return None
    return get_user_by_username(db, username=payload["sub"])

def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Decode the bearer token and load its user.
    """
    user = _user_from_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")
    return current_user

def get_current_superuser(
    current_user: User = Depends(get_current_active_user)
) -> User:
    if not current_user.is_superuser:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Superuser privileges required")
    return current_user

def require_api_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Current user for the /api routes, which answer 401 as {"error": "Unauthorized", ...}.
    """
    user = _user_from_token(db, token)
    if user is None or not user.is_active:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized", "You must be logged in to access this resource")
    return user

# Project / task access

def _check_owner(project: ProjectModel, current_user: User) -> None:
    if not current_user.is_superuser and project.owner_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this project"
        )

def get_project_for_user_or_404_403(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
) -> ProjectModel:
    try:
        project = get_project_crud(db, project_id)
    except ProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    _check_owner(project, current_user)
    return project

def get_deleted_project_for_user_or_404_403(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
) -> ProjectModel:
    """
    Same as above, archived projects included.
    """
    try:
        project = get_project_crud(db, project_id, include_deleted=True)
    except ProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    _check_owner(project, current_user)
    return project

def get_task_for_user_or_404_403(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
) -> TaskModel:
    """
    A task is accessible through its project.
    """
    try:
        task = get_task_crud(db, task_id)
        project = get_project_crud(db, task.project_id, include_deleted=True)
    except (TaskNotFound, ProjectNotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    if not current_user.is_superuser and project.owner_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this task"
        )
    return task
