#buildtrack/crud/report.py
from sqlalchemy.orm import Session
from datetime import date
from typing import Dict, Any, List, Optional, Tuple
import logging

from buildtrack.models.task import Task, TaskStatus
from buildtrack.models.project import Project
from buildtrack.models.user import User as UserModel

logger = logging.getLogger("BuildTrack.Reports")

TASK_COMPLETION_LABELS = ["Completed", "In Progress", "Not Started", "Delayed"]
TASK_COMPLETION_COLORS = ["#10B981", "#3B82F6", "#9CA3AF", "#EF4444"]
PERFORMANCE_MONTHS = 6

def _visible_tasks(db: Session, current_user: UserModel) -> List[Task]:
    query = db.query(Task).join(Project, Task.project_id == Project.id).filter(
        Task.is_deleted == False,
        Project.is_deleted == False,
    )
    if not current_user.is_superuser:
        query = query.filter(Project.owner_id == current_user.id)
    return query.all()

def classify_task(task: Task, today: date) -> Optional[str]:
    """
    Bucket for the completion chart. Cancelled tasks are not charted.
    """
    if task.status == TaskStatus.COMPLETED.value:
        return "Completed"
    if task.status == TaskStatus.CANCELLED.value:
        return None
    if task.due_date and task.due_date < today:
        return "Delayed"
    if task.status == TaskStatus.TODO.value:
        return "Not Started"
    return "In Progress"

def task_completion_report(db: Session, current_user: UserModel, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    counts = {label: 0 for label in TASK_COMPLETION_LABELS}
    for task in _visible_tasks(db, current_user):
        bucket = classify_task(task, today)
        if bucket:
            counts[bucket] += 1
    logger.info(f"Built task completion report for user {current_user.id}: {counts}")
    return {
        "labels": TASK_COMPLETION_LABELS,
        "datasets": [{
            "label": "Tasks",
            "data": [counts[label] for label in TASK_COMPLETION_LABELS],
            "backgroundColor": TASK_COMPLETION_COLORS,
        }],
    }

def _last_months(today: date, count: int) -> List[Tuple[int, int]]:
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))

def project_performance_report(db: Session, current_user: UserModel, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Per month over the last six months (current month included): tasks
    completed, and those completed on or before their due date.
    """
    today = today or date.today()
    months = _last_months(today, PERFORMANCE_MONTHS)
    completed = {m: 0 for m in months}
    on_schedule = {m: 0 for m in months}

    for task in _visible_tasks(db, current_user):
        if task.status != TaskStatus.COMPLETED.value or task.completed_at is None:
            continue
        done = task.completed_at.date()
        key = (done.year, done.month)
        if key not in completed:
            continue
        completed[key] += 1
        if task.due_date is None or done <= task.due_date:
            on_schedule[key] += 1

    return {
        "labels": [date(y, m, 1).strftime("%b %Y") for y, m in months],
        "datasets": [
            {"label": "Tasks Completed", "data": [completed[m] for m in months], "backgroundColor": "#3B82F6"},
            {"label": "Completed On Schedule", "data": [on_schedule[m] for m in months], "backgroundColor": "#10B981"},
        ],
    }
