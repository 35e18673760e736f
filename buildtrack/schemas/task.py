#buildtrack/schemas/task.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from buildtrack.models.task import TaskStatus, TaskPriority, TaskCategory

class TaskBase(BaseModel):
    """
    TaskBase: fields shared by create/read.
    """
    title: str = Field(..., min_length=1, max_length=160, examples=["Pour foundation slab"])
    description: Optional[str] = Field("", max_length=5000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.OTHER
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    assignee_id: Optional[int] = None

class TaskCreate(TaskBase):
    project_id: int

class TaskUpdate(BaseModel):
    """
    TaskUpdate: all fields optional. Any status may follow any other.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=160)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    category: Optional[TaskCategory] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    assignee_id: Optional[int] = None

class TaskRead(TaskBase):
    id: int
    project_id: int
    is_deleted: bool
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
