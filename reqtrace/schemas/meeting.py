from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from reqtrace.schemas.stakeholder import LinkedRef, StakeholderRead


class MeetingCreate(BaseModel):
    project_id: int
    title: str
    description: Optional[str] = None
    meeting_date: datetime
    duration: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    participant_ids: List[int] = []
    requirement_ids: List[int] = []


class MeetingRead(BaseModel):
    id: int
    project_id: int
    title: str
    description: Optional[str]
    meeting_date: datetime
    duration: Optional[int]
    location: Optional[str]
    notes: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class MeetingWithParticipants(MeetingRead):
    participants: List[StakeholderRead] = []


class MeetingDetail(MeetingWithParticipants):
    requirements: List[LinkedRef] = []
