#buildtrack/models/task.py
import enum
from datetime import datetime, date
from sqlalchemy import (
    Column, Integer, String, Date, DateTime, ForeignKey, Boolean, Float, Text, Index, func
)
from buildtrack.models.base import Base

class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class TaskCategory(str, enum.Enum):
    PLANNING = "planning"
    DESIGN = "design"
    PROCUREMENT = "procurement"
    CONSTRUCTION = "construction"
    INSPECTION = "inspection"
    ADMINISTRATION = "administration"
    MAINTENANCE = "maintenance"
    OTHER = "other"

class Task(Base):
    """
    Task: unit of work inside a project.
    """
    __tablename__ = "tasks"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    project_id: int = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title: str = Column(String(160), nullable=False)
    description: str = Column(Text, default="")
    status: str = Column(String(24), nullable=False, default=TaskStatus.TODO.value)
    priority: str = Column(String(16), nullable=False, default=TaskPriority.MEDIUM.value)
    category: str = Column(String(32), nullable=False, default=TaskCategory.OTHER.value)
    start_date: date = Column(Date, nullable=True)
    due_date: date = Column(Date, nullable=True)
    completed_at: datetime = Column(DateTime(timezone=True), nullable=True)
    estimated_hours: float = Column(Float, nullable=True)
    assignee_id: int = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    is_deleted: bool = Column(Boolean, default=False, nullable=False)
    deleted_at: datetime = Column(DateTime(timezone=True), nullable=True)
    created_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_tasks_due_date", "due_date"),
        Index("ix_tasks_status", "status"),
    )

    def __repr__(self):
        return (
            f"<Task(id={self.id}, title='{self.title}', status={self.status}, "
            f"project_id={self.project_id}, due_date={self.due_date})>"
        )
