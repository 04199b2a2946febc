from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class StakeholderCreate(BaseModel):
    project_id: int
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class StakeholderUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class StakeholderRead(BaseModel):
    id: int
    project_id: int
    name: str
    email: Optional[str]
    role: Optional[str]
    department: Optional[str]
    phone: Optional[str]
    notes: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class LinkedRef(BaseModel):
    id: int
    title: str


class StakeholderWithLinks(StakeholderRead):
    requirements: List[LinkedRef] = []
    meetings: List[LinkedRef] = []
