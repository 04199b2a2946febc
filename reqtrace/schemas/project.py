from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class ProjectCreate(BaseModel):
    workspace_id: int
    name: str
    description: Optional[str] = None
    team_lead: Optional[int] = None
    member_ids: List[int] = []

class ProjectRead(BaseModel):
    id: int
    workspace_id: int
    name: str
    description: Optional[str]
    team_lead: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True

class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    team_lead: Optional[int] = None

class ProjectMemberCreate(BaseModel):
    user_id: int
