from pydantic import BaseModel
from datetime import datetime

from reqtrace.models.workspace import WorkspaceRole


class WorkspaceCreate(BaseModel):
    name: str


class WorkspaceRead(BaseModel):
    id: int
    name: str
    owner_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class WorkspaceMemberCreate(BaseModel):
    user_id: int
    role: WorkspaceRole = WorkspaceRole.MEMBER


class WorkspaceMemberRead(BaseModel):
    id: int
    workspace_id: int
    user_id: int
    role: WorkspaceRole

    class Config:
        from_attributes = True
