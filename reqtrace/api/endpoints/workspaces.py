from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from typing import List

from reqtrace.api.endpoints.auth import get_current_user
from reqtrace.database import get_session
from reqtrace.models.user import User
from reqtrace.models.workspace import Workspace, WorkspaceMember, WorkspaceRole
from reqtrace.schemas.workspace import (
    WorkspaceCreate,
    WorkspaceMemberCreate,
    WorkspaceMemberRead,
    WorkspaceRead,
)
from reqtrace.services.access import workspace_role

router = APIRouter()


@router.post("", response_model=WorkspaceRead, status_code=status.HTTP_201_CREATED)
def create_workspace(
    workspace_in: WorkspaceCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if not workspace_in.name.strip():
        raise HTTPException(status_code=400, detail="Workspace name is required")
    workspace = Workspace(name=workspace_in.name, owner_id=current_user.id)
    session.add(workspace)
    session.flush()
    # El creador es administrador del workspace
    session.add(WorkspaceMember(workspace_id=workspace.id, user_id=current_user.id, role=WorkspaceRole.ADMIN))
    session.commit()
    session.refresh(workspace)
    return workspace


@router.get("", response_model=List[WorkspaceRead])
def list_workspaces(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return session.exec(
        select(Workspace)
        .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
        .where(WorkspaceMember.user_id == current_user.id)
        .order_by(Workspace.id)
    ).all()


@router.post("/{workspace_id}/members", response_model=WorkspaceMemberRead, status_code=status.HTTP_201_CREATED)
def add_workspace_member(
    workspace_id: int,
    member_in: WorkspaceMemberCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if not session.get(Workspace, workspace_id):
        raise HTTPException(status_code=404, detail="Workspace not found")
    if workspace_role(session, current_user.id, workspace_id) != WorkspaceRole.ADMIN:
        raise HTTPException(status_code=403, detail="Only workspace admins can add members")
    if not session.get(User, member_in.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    if workspace_role(session, member_in.user_id, workspace_id) is not None:
        raise HTTPException(status_code=400, detail="User is already a member of this workspace")

    member = WorkspaceMember(workspace_id=workspace_id, user_id=member_in.user_id, role=member_in.role)
    session.add(member)
    session.commit()
    session.refresh(member)
    return member
