#buildtrack/schemas/auth.py
from pydantic import BaseModel, Field, EmailStr, constr
from typing import Optional

class LoginResponse(BaseModel):
    """
    LoginResponse: successful login (access + refresh).
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds", examples=[3600])
    refresh_token: Optional[str] = Field(None, description="JWT refresh token")

class TokenRefreshRequest(BaseModel):
    refresh_token: str = Field(..., description="JWT refresh token")

class TokenRefreshResponse(BaseModel):
    """
    TokenRefreshResponse: rotated access + refresh tokens.
    """
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_token: str

class PasswordResetRequest(BaseModel):
    email: EmailStr

class PasswordReset(BaseModel):
    token: str = Field(..., description="Token received by email")
    new_password: constr(min_length=8)
