#buildtrack/models/project.py
import enum
from datetime import datetime, date
from buildtrack.models.base import Base
from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Text, JSON, ForeignKey, Boolean, Float, Index, func
)

class ProjectType(str, enum.Enum):
    RESIDENTIAL = "RESIDENTIAL"
    COMMERCIAL = "COMMERCIAL"
    INDUSTRIAL = "INDUSTRIAL"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    RENOVATION = "RENOVATION"
    OTHER = "OTHER"

class ProjectStatus(str, enum.Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    DELAYED = "delayed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    IN_PROGRESS = "in-progress"

class ProjectPriority(str, enum.Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

class Project(Base):
    """
    Project: a construction project. Soft-deleted rather than removed.
    Status is a plain string; any transition is allowed.
    """
    __tablename__ = "projects"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    name: str = Column(String(128), nullable=False, index=True, doc="Project name")
    description: str = Column(Text, nullable=True)
    project_type: str = Column(String(32), nullable=False, default=ProjectType.OTHER.value)
    status: str = Column(String(32), nullable=False, default=ProjectStatus.PLANNING.value, index=True)
    priority: str = Column(String(16), nullable=False, default=ProjectPriority.MEDIUM.value)
    start_date: date = Column(Date, nullable=True)
    end_date: date = Column(Date, nullable=True)
    budget: float = Column(Float, nullable=True)
    location: dict = Column(JSON, nullable=True, doc="{address, city, state, zipCode, country, coordinates}")
    tags: list = Column(JSON, nullable=False, default=lambda: [])
    thumbnail_url: str = Column(String(255), nullable=True)
    owner_id: int = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    organization_id: int = Column(Integer, ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True)
    is_deleted: bool = Column(Boolean, default=False, nullable=False)
    deleted_at: datetime = Column(DateTime(timezone=True), nullable=True)
    created_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_projects_end_date", "end_date"),
    )

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}', status='{self.status}', type='{self.project_type}')>"
