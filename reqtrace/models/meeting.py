from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime


class Meeting(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    title: str
    description: Optional[str] = None
    meeting_date: datetime
    duration: Optional[int] = None     # minutos
    location: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
