from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from reqtrace.models.requirement import Priority, RequirementStatus, RequirementType
from reqtrace.models.task import TaskStatus


class MatrixStakeholder(BaseModel):
    id: int
    name: str
    role: str


class MatrixTask(BaseModel):
    id: int
    title: str
    status: TaskStatus
    assignee: Optional[str] = None


class MatrixMeeting(BaseModel):
    id: int
    title: str
    date: datetime


class MatrixRow(BaseModel):
    id: int
    title: str
    type: RequirementType
    status: RequirementStatus
    priority: Priority
    owner: Optional[str] = None
    stakeholders: List[MatrixStakeholder] = []
    tasks: List[MatrixTask] = []
    meetings: List[MatrixMeeting] = []


class ProjectRef(BaseModel):
    id: int
    name: str


class TraceabilityMatrix(BaseModel):
    project: ProjectRef
    matrix: List[MatrixRow]
