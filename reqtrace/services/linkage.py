"""
Vínculos entre requisitos, tareas, stakeholders y reuniones.

``link_task`` es la única operación explícita; los vínculos con stakeholders y
reuniones se crean junto con el requisito o la reunión. Los ids repetidos en
una misma petición se colapsan y los de otro proyecto se rechazan.
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, col

from reqtrace.core.errors import NotFoundError, ValidationError
from reqtrace.models.links import MeetingParticipant, MeetingRequirement, RequirementTask, StakeholderRequirement
from reqtrace.models.project import Project
from reqtrace.models.requirement import Requirement
from reqtrace.models.requirement_history import HistoryAction
from reqtrace.models.task import Task
from reqtrace.services import history
from reqtrace.services.access import require, resolve_access
from reqtrace.services.projections import task_payload, users_by_id

logger = logging.getLogger(__name__)

DEFAULT_STAKEHOLDER_ROLE = "REVIEWER"


def unique_ids(ids: List[int]) -> List[int]:
    return list(dict.fromkeys(ids or []))


def ensure_in_project(session: Session, model, ids: List[int], project_id: int, label: str) -> None:
    """Todos los ids deben existir y pertenecer al proyecto."""
    if not ids:
        return
    rows = session.exec(select(model).where(col(model.id).in_(ids))).all()
    in_project = {r.id for r in rows if r.project_id == project_id}
    for i in ids:
        if i not in in_project:
            raise ValidationError(f"{label} {i} does not belong to this project")


def link_stakeholders(session: Session, requirement_id: int, stakeholder_ids: List[int]) -> None:
    for stakeholder_id in unique_ids(stakeholder_ids):
        session.add(
            StakeholderRequirement(
                requirement_id=requirement_id,
                stakeholder_id=stakeholder_id,
                role=DEFAULT_STAKEHOLDER_ROLE,
            )
        )


def link_meeting(session: Session, meeting_id: int, participant_ids: List[int], requirement_ids: List[int]) -> None:
    for stakeholder_id in unique_ids(participant_ids):
        session.add(MeetingParticipant(meeting_id=meeting_id, stakeholder_id=stakeholder_id))
    for requirement_id in unique_ids(requirement_ids):
        session.add(MeetingRequirement(meeting_id=meeting_id, requirement_id=requirement_id))


def link_task(session: Session, requirement_id: int, task_id: int, user_id: int) -> dict:
    requirement = session.get(Requirement, requirement_id)
    task = session.get(Task, task_id)
    if not requirement or not task:
        raise NotFoundError("Requirement or task not found")

    access = resolve_access(session, user_id, session.get(Project, requirement.project_id))
    require(access.can_contribute, "You don't have permission to link tasks to this requirement")

    if requirement.project_id != task.project_id:
        raise ValidationError("Requirement and task must be in the same project")

    existing = session.exec(
        select(RequirementTask)
        .where(RequirementTask.requirement_id == requirement_id)
        .where(RequirementTask.task_id == task_id)
    ).first()
    if existing:
        raise ValidationError("This requirement is already linked to this task")

    link = RequirementTask(requirement_id=requirement_id, task_id=task_id)
    session.add(link)
    # Vincular no sube la versión: se registra con la versión actual
    history.record(
        session,
        requirement_id,
        user_id,
        HistoryAction.TASK_LINKED,
        requirement.version,
        history.task_link_changes(task),
    )
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ValidationError("This requirement is already linked to this task") from exc
    session.refresh(link)
    session.refresh(task)
    logger.info("Requirement %s linked to task %s by user %s", requirement_id, task_id, user_id)

    return {
        "id": link.id,
        "requirement_id": link.requirement_id,
        "created_at": link.created_at,
        "task": task_payload(task, users_by_id(session, [task.assignee_id])),
    }
