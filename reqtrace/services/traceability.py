"""
Matriz de trazabilidad: requisitos del proyecto con sus stakeholders, tareas y
reuniones. Sólo lectura; orden ascendente de creación (al revés que el listado
de requisitos).
"""

from collections import defaultdict
from typing import Dict, List

from sqlmodel import Session, select, col

from reqtrace.models.links import MeetingRequirement, RequirementTask, StakeholderRequirement
from reqtrace.models.meeting import Meeting
from reqtrace.models.requirement import Requirement
from reqtrace.models.stakeholder import Stakeholder
from reqtrace.models.task import Task
from reqtrace.services.access import load_project, require, resolve_access
from reqtrace.services.projections import users_by_id


def build_matrix(session: Session, project_id: int, user_id: int) -> dict:
    project = load_project(session, project_id)
    access = resolve_access(session, user_id, project)
    require(access.can_read, "You don't have access to this project")

    requirements = session.exec(
        select(Requirement)
        .where(Requirement.project_id == project_id)
        .order_by(col(Requirement.created_at).asc(), col(Requirement.id).asc())
    ).all()
    ids = [r.id for r in requirements]

    stakeholders: Dict[int, List[dict]] = defaultdict(list)
    tasks: Dict[int, List[Task]] = defaultdict(list)
    meetings: Dict[int, List[dict]] = defaultdict(list)

    if ids:
        for link, s in session.exec(
            select(StakeholderRequirement, Stakeholder)
            .join(Stakeholder, StakeholderRequirement.stakeholder_id == Stakeholder.id)
            .where(col(StakeholderRequirement.requirement_id).in_(ids))
            .order_by(StakeholderRequirement.id)
        ).all():
            stakeholders[link.requirement_id].append({"id": s.id, "name": s.name, "role": link.role})

        for link, task in session.exec(
            select(RequirementTask, Task)
            .join(Task, RequirementTask.task_id == Task.id)
            .where(col(RequirementTask.requirement_id).in_(ids))
            .order_by(RequirementTask.id)
        ).all():
            tasks[link.requirement_id].append(task)

        for link, m in session.exec(
            select(MeetingRequirement, Meeting)
            .join(Meeting, MeetingRequirement.meeting_id == Meeting.id)
            .where(col(MeetingRequirement.requirement_id).in_(ids))
            .order_by(MeetingRequirement.id)
        ).all():
            meetings[link.requirement_id].append({"id": m.id, "title": m.title, "date": m.meeting_date})

    users = users_by_id(
        session,
        [r.owner_id for r in requirements] + [t.assignee_id for ts in tasks.values() for t in ts],
    )

    def name_of(user_id):
        user = users.get(user_id)
        return user.name if user else None

    matrix = [
        {
            "id": r.id,
            "title": r.title,
            "type": r.type,
            "status": r.status,
            "priority": r.priority,
            "owner": name_of(r.owner_id),
            "stakeholders": stakeholders.get(r.id, []),
            "tasks": [
                {"id": t.id, "title": t.title, "status": t.status, "assignee": name_of(t.assignee_id)}
                for t in tasks.get(r.id, [])
            ],
            "meetings": meetings.get(r.id, []),
        }
        for r in requirements
    ]
    return {"project": {"id": project.id, "name": project.name}, "matrix": matrix}
