from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint
from datetime import datetime


class StakeholderRequirement(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("requirement_id", "stakeholder_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    requirement_id: int = Field(foreign_key="requirement.id", index=True)
    stakeholder_id: int = Field(foreign_key="stakeholder.id", index=True)
    role: str = "REVIEWER"


class RequirementTask(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("requirement_id", "task_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    requirement_id: int = Field(foreign_key="requirement.id", index=True)
    task_id: int = Field(foreign_key="task.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class MeetingRequirement(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("meeting_id", "requirement_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    meeting_id: int = Field(foreign_key="meeting.id", index=True)
    requirement_id: int = Field(foreign_key="requirement.id", index=True)


class MeetingParticipant(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("meeting_id", "stakeholder_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    meeting_id: int = Field(foreign_key="meeting.id", index=True)
    stakeholder_id: int = Field(foreign_key="stakeholder.id", index=True)
