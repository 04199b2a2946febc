# schemas/requirement.py

from pydantic import BaseModel
from typing import Any, List, Optional
from datetime import datetime

from reqtrace.models.requirement import Priority, RequirementStatus, RequirementType
from reqtrace.models.requirement_history import HistoryAction
from reqtrace.schemas.meeting import MeetingWithParticipants
from reqtrace.schemas.stakeholder import StakeholderRead
from reqtrace.schemas.task import TaskWithAssignee
from reqtrace.schemas.user import UserBrief


class RequirementCreate(BaseModel):
    project_id: int
    title: str
    description: Optional[str] = None
    # None => se aplica el valor por defecto del modelo
    type: Optional[RequirementType] = None
    priority: Optional[Priority] = None
    status: Optional[RequirementStatus] = None
    stakeholder_ids: List[int] = []


class RequirementUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[RequirementType] = None
    priority: Optional[Priority] = None
    status: Optional[RequirementStatus] = None


class RequirementRead(BaseModel):
    id: int
    title: str
    description: Optional[str]
    type: RequirementType
    priority: Priority
    status: RequirementStatus
    version: int
    project_id: int
    owner_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FieldChange(BaseModel):
    """One tagged entry of a history diff."""

    field: str
    old: Any = None
    new: Any = None


class RequirementHistoryRead(BaseModel):
    id: int
    requirement_id: int
    action: HistoryAction
    version: int
    changes: List[FieldChange]
    created_at: datetime
    user: Optional[UserBrief] = None

    class Config:
        from_attributes = True


class CommentCreate(BaseModel):
    content: str


class CommentRead(BaseModel):
    id: int
    requirement_id: int
    content: str
    created_at: datetime
    user: Optional[UserBrief] = None

    class Config:
        from_attributes = True


class AttachmentRead(BaseModel):
    id: int
    name: str
    url: str
    uploaded_by: int
    created_at: datetime

    class Config:
        from_attributes = True


class StakeholderLinkRead(BaseModel):
    role: str
    stakeholder: StakeholderRead


class TaskLinkRequest(BaseModel):
    task_id: int


class TaskLinkRead(BaseModel):
    id: int
    requirement_id: int
    created_at: datetime
    task: TaskWithAssignee


class MeetingLinkRead(BaseModel):
    meeting: MeetingWithParticipants


class RequirementListItem(RequirementRead):
    owner: Optional[UserBrief] = None
    stakeholders: List[StakeholderLinkRead] = []
    attachments: List[AttachmentRead] = []
    # en el listado sólo los últimos comentarios
    comments: List[CommentRead] = []
    task_links: List[TaskLinkRead] = []
    meeting_links: List[MeetingLinkRead] = []


class RequirementDetail(RequirementListItem):
    history: List[RequirementHistoryRead] = []
