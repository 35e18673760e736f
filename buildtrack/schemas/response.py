#buildtrack/schemas/response.py
from pydantic import BaseModel, Field
from typing import Any, Optional

class ErrorResponse(BaseModel):
    """
    ErrorResponse: error body of the profile and dashboard routes.
    """
    error: str = Field(..., examples=["Unauthorized"], description="Short error title")
    message: Optional[str] = Field(None, examples=["You must be logged in to access your profile"])

class SuccessResponse(BaseModel):
    """
    SuccessResponse: generic result of an operation.
    """
    result: Any = Field(..., description="Operation result")
    detail: Optional[str] = Field(None, examples=["Operation successful"])

class MessageResponse(BaseModel):
    """
    MessageResponse: plain confirmation message.
    """
    message: str = Field(..., examples=["Action completed successfully"])
