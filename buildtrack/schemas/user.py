#buildtrack/schemas/user.py
from pydantic import BaseModel, Field, EmailStr, constr
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    """
    UserBase: account fields shared by create/read.
    """
    username: constr(min_length=3, max_length=50) = Field(..., examples=["jsilva"])
    email: EmailStr = Field(..., examples=["j.silva@example.com"])
    first_name: Optional[str] = Field(None, examples=["Joana"])
    last_name: Optional[str] = Field(None, examples=["Silva"])
    language: Optional[str] = Field(None, examples=["pt-BR"], description="Preferred locale")

class UserCreate(UserBase):
    """
    UserCreate: registration payload.
    """
    password: constr(min_length=8) = Field(..., examples=["StrongPassw0rd!"])
    is_active: bool = True
    is_superuser: bool = False

class UserRead(UserBase):
    """
    UserRead: account as returned by the API.
    """
    id: int
    is_active: bool
    is_superuser: bool
    role: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
