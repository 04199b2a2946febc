from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from reqtrace.models.requirement import Priority
from reqtrace.models.task import TaskStatus
from reqtrace.schemas.user import UserBrief


class TaskCreate(BaseModel):
    project_id: int
    title: str
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    assignee_id: Optional[int] = None
    due_date: Optional[datetime] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    assignee_id: Optional[int] = None
    due_date: Optional[datetime] = None


class TaskRead(BaseModel):
    id: int
    project_id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: Priority
    assignee_id: Optional[int]
    due_date: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class TaskWithAssignee(TaskRead):
    assignee: Optional[UserBrief] = None
