#buildtrack/models/user.py
from datetime import datetime, date
from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, JSON, ForeignKey, func
)
from sqlalchemy.orm import relationship
from buildtrack.models.base import Base

class User(Base):
    """
    User: account plus profile. Preferences, dashboards, recent projects,
    favorite tools and device tokens are JSON documents on the row, not relations.
    """
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)
    username: str = Column(String(50), unique=True, nullable=False, index=True, doc="Unique username")
    email: str = Column(String(255), unique=True, nullable=False, index=True, doc="Email")
    password_hash: str = Column(String(256), nullable=False, doc="Password hash")
    password_reset_token: str = Column(String(255), nullable=True, index=True, doc="Password reset token")
    password_reset_token_expires_at: datetime = Column(DateTime(timezone=True), nullable=True, doc="Reset token expiry")
    is_active: bool = Column(Boolean, default=True, nullable=False, doc="Account is active")
    is_superuser: bool = Column(Boolean, default=False, nullable=False, doc="Administrator")
    role: str = Column(String(64), nullable=True, doc="Role name (project_manager, supervisor, ...)")

    # Basic profile
    first_name: str = Column(String(100), nullable=True)
    last_name: str = Column(String(100), nullable=True)
    avatar_url: str = Column(String(255), nullable=True)
    phone_number: str = Column(String(32), nullable=True)

    # Professional
    job_title: str = Column(String(128), nullable=True)
    department: str = Column(String(128), nullable=True)
    skills: list = Column(JSON, nullable=False, default=lambda: [])
    certifications: list = Column(JSON, nullable=False, default=lambda: [])

    # Communication
    preferred_contact_method: str = Column(String(32), nullable=True, doc="email, sms, phone, push")
    timezone: str = Column(String(64), nullable=True)
    language: str = Column(String(16), nullable=True, doc="Locale code, e.g. 'pt-BR'")
    preferences: dict = Column(JSON, nullable=True, doc="Free-form preferences, including 'dashboards'")

    # UX customization
    dashboard_layout: dict = Column(JSON, nullable=True)
    recent_projects: list = Column(JSON, nullable=True)
    favorite_tools: list = Column(JSON, nullable=True)

    # Mobile
    device_tokens: list = Column(JSON, nullable=True, doc="[{token, device, lastUpdated}]")
    offline_access: bool = Column(Boolean, default=False, nullable=False)
    data_usage_preferences: dict = Column(JSON, nullable=True)

    # Analytics
    login_streak: int = Column(Integer, default=0, nullable=False)
    last_login_at: datetime = Column(DateTime(timezone=True), nullable=True)
    last_login_date: date = Column(Date, nullable=True, doc="Calendar day of the last login, for the streak")
    onboarding_status: str = Column(String(32), nullable=True, default="pending")

    organization_id: int = Column(Integer, ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True, unique=True)
    # plain column, a FK here would make users <-> projects a cycle
    last_active_project_id: int = Column(Integer, nullable=True)

    created_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    organization = relationship("Organization", back_populates="user")
    access_tokens = relationship("AccessToken", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', email='{self.email}')>"
