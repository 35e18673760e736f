# buildtrack/core/exceptions.py
from typing import Optional

from fastapi import HTTPException


class BaseAppException(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str = "App exception"):
        super().__init__(message)

# ==== Validation ====

class ValidationError(BaseAppException):
    """Generic validation error."""
    def __init__(self, message: str = "Validation error"):
        super().__init__(message)

class ProjectValidationError(ValidationError):
    def __init__(self, message: str = "Project validation error"):
        super().__init__(message)

class TaskValidationError(ValidationError):
    def __init__(self, message: str = "Task validation error"):
        super().__init__(message)

class ProfileValidationError(ValidationError):
    def __init__(self, message: str = "Profile validation error"):
        super().__init__(message)

class DashboardValidationError(ValidationError):
    def __init__(self, message: str = "Invalid dashboard data"):
        super().__init__(message)

# ==== NotFound ====

class NotFoundError(BaseAppException):
    """A requested resource does not exist."""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)

class ProjectNotFound(NotFoundError):
    def __init__(self, message: str = "Project not found"):
        super().__init__(message)

class TaskNotFound(NotFoundError):
    def __init__(self, message: str = "Task not found"):
        super().__init__(message)

class ProfileNotFound(NotFoundError):
    def __init__(self, message: str = "User profile not found"):
        super().__init__(message)

class DashboardNotFound(NotFoundError):
    def __init__(self, message: str = "Dashboard not found"):
        super().__init__(message)

# ==== Duplicates ====

class DuplicateProjectName(BaseAppException):
    """A project with this name already exists."""
    def __init__(self, message: str = "Duplicate project name"):
        super().__init__(message)

# ==== Auth ====

class AuthError(BaseAppException):
    """Authentication or authorization failure."""
    def __init__(self, message: str = "Authentication or authorization error"):
        super().__init__(message)

# ==== External services ====

class TranslationServiceError(BaseAppException):
    """The translation-management service could not be reached or rejected the request."""
    def __init__(self, message: str = "Translation service error"):
        super().__init__(message)

# ==== HTTP ====

class ApiError(HTTPException):
    """
    HTTP error rendered as {"error": ..., "message": ...}.

    Used by the profile and dashboard routes; the handler lives in main.py.
    """
    def __init__(self, status_code: int, error: str, message: Optional[str] = None):
        super().__init__(status_code=status_code, detail=message or error)
        self.error = error
        self.message = message

    def to_content(self) -> dict:
        content = {"error": self.error}
        if self.message is not None:
            content["message"] = self.message
        return content
