"""
Resolución de permisos sobre un proyecto.

Todos los endpoints pasan por ``resolve_access`` y consultan una de las
capacidades de ``ProjectAccess`` en lugar de repetir las búsquedas de
membresía:

    project = load_project(session, project_id)
    access = resolve_access(session, current_user.id, project)
    require(access.can_manage, "You don't have permission to delete this requirement")
"""

from dataclasses import dataclass
from typing import Optional

from sqlmodel import Session, select

from reqtrace.core.errors import ForbiddenError, NotFoundError
from reqtrace.models.project import Project, ProjectMember
from reqtrace.models.requirement import Requirement
from reqtrace.models.workspace import WorkspaceMember, WorkspaceRole


@dataclass(frozen=True)
class ProjectAccess:
    is_workspace_member: bool = False
    is_workspace_admin: bool = False
    is_project_member: bool = False
    is_project_lead: bool = False

    @property
    def can_read(self) -> bool:
        return self.is_workspace_member or self.is_project_member

    @property
    def can_contribute(self) -> bool:
        return self.is_workspace_admin or self.is_project_member or self.is_project_lead

    @property
    def can_manage(self) -> bool:
        return self.is_workspace_admin or self.is_project_lead

    def can_edit_requirement(self, requirement: Requirement, user_id: int) -> bool:
        return self.can_manage or requirement.owner_id == user_id


def resolve_access(session: Session, user_id: int, project: Optional[Project]) -> ProjectAccess:
    if project is None:
        return ProjectAccess()

    ws_member = session.exec(
        select(WorkspaceMember)
        .where(WorkspaceMember.workspace_id == project.workspace_id)
        .where(WorkspaceMember.user_id == user_id)
    ).first()
    project_member = session.exec(
        select(ProjectMember)
        .where(ProjectMember.project_id == project.id)
        .where(ProjectMember.user_id == user_id)
    ).first()

    return ProjectAccess(
        is_workspace_member=ws_member is not None,
        is_workspace_admin=ws_member is not None and ws_member.role == WorkspaceRole.ADMIN,
        is_project_member=project_member is not None,
        is_project_lead=project.team_lead is not None and project.team_lead == user_id,
    )


def workspace_role(session: Session, user_id: int, workspace_id: int) -> Optional[WorkspaceRole]:
    member = session.exec(
        select(WorkspaceMember)
        .where(WorkspaceMember.workspace_id == workspace_id)
        .where(WorkspaceMember.user_id == user_id)
    ).first()
    return member.role if member else None


def load_project(session: Session, project_id: int) -> Project:
    project = session.get(Project, project_id)
    if not project:
        raise NotFoundError("Project not found")
    return project


def require(allowed: bool, message: str) -> None:
    if not allowed:
        raise ForbiddenError(message)
