from fastapi import APIRouter, HTTPException, Depends, status
from sqlmodel import Session, select
from typing import List
from reqtrace.models.project import Project, ProjectMember
from reqtrace.models.workspace import Workspace, WorkspaceRole
from reqtrace.schemas.project import ProjectCreate, ProjectMemberCreate, ProjectRead, ProjectUpdate
from reqtrace.api.endpoints.auth import get_current_user
from reqtrace.database import get_session
from reqtrace.models.user import User
from reqtrace.services.access import load_project, require, resolve_access, workspace_role
from reqtrace.services.project_service import delete_project as purge_project

router = APIRouter()

@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if not session.get(Workspace, project_in.workspace_id):
        raise HTTPException(status_code=404, detail="Workspace not found")
    if workspace_role(session, current_user.id, project_in.workspace_id) != WorkspaceRole.ADMIN:
        raise HTTPException(status_code=403, detail="Only workspace admins can create projects")
    if not project_in.name.strip():
        raise HTTPException(status_code=400, detail="Project name is required")

    team_lead = project_in.team_lead or current_user.id
    member_ids = list(dict.fromkeys([team_lead] + project_in.member_ids))
    for user_id in member_ids:
        if workspace_role(session, user_id, project_in.workspace_id) is None:
            raise HTTPException(status_code=400, detail=f"User {user_id} is not a member of this workspace")

    project = Project(
        workspace_id=project_in.workspace_id,
        name=project_in.name,
        description=project_in.description,
        team_lead=team_lead,
    )
    session.add(project)
    session.flush()
    for user_id in member_ids:
        session.add(ProjectMember(project_id=project.id, user_id=user_id))
    session.commit()
    session.refresh(project)
    return project

@router.get("/workspace/{workspace_id}", response_model=List[ProjectRead])
def list_projects(
    workspace_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if workspace_role(session, current_user.id, workspace_id) is None:
        raise HTTPException(status_code=404, detail="Workspace not found")
    projects = session.exec(
        select(Project).where(Project.workspace_id == workspace_id).order_by(Project.id)
    ).all()
    return projects

@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, project_id)
    require(resolve_access(session, current_user.id, project).can_read, "You don't have access to this project")
    return project

@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    project_in: ProjectUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, project_id)
    require(resolve_access(session, current_user.id, project).can_manage, "You don't have permission to update this project")
    # null explícito sólo vale para description
    project_data = {
        k: v for k, v in project_in.dict(exclude_unset=True).items() if v is not None or k == "description"
    }
    if "name" in project_data and not project_data["name"].strip():
        raise HTTPException(status_code=400, detail="Project name is required")
    if project_data.get("team_lead") is not None and workspace_role(session, project_data["team_lead"], project.workspace_id) is None:
        raise HTTPException(status_code=400, detail="Team lead must be a member of this workspace")
    for key, value in project_data.items():
        setattr(project, key, value)
    session.add(project)
    session.commit()
    session.refresh(project)
    return project

@router.post("/{project_id}/members", status_code=status.HTTP_201_CREATED)
def add_project_member(
    project_id: int,
    member_in: ProjectMemberCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, project_id)
    require(resolve_access(session, current_user.id, project).can_manage, "You don't have permission to add members to this project")
    if workspace_role(session, member_in.user_id, project.workspace_id) is None:
        raise HTTPException(status_code=400, detail="User is not a member of this workspace")
    exists = session.exec(
        select(ProjectMember)
        .where(ProjectMember.project_id == project_id)
        .where(ProjectMember.user_id == member_in.user_id)
    ).first()
    if exists:
        raise HTTPException(status_code=400, detail="User is already a member of this project")
    member = ProjectMember(project_id=project_id, user_id=member_in.user_id)
    session.add(member)
    session.commit()
    return {"project_id": project_id, "user_id": member_in.user_id}

@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, project_id)
    require(resolve_access(session, current_user.id, project).can_manage, "You don't have permission to delete this project")
    purge_project(session, project)
