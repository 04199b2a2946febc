import logging
from collections import defaultdict
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, select, delete, col

from reqtrace.core.errors import ConflictError, NotFoundError, ValidationError
from reqtrace.models.links import MeetingRequirement, RequirementTask, StakeholderRequirement
from reqtrace.models.meeting import Meeting
from reqtrace.models.project import Project
from reqtrace.models.requirement import (
    Priority,
    Requirement,
    RequirementAttachment,
    RequirementComment,
    RequirementStatus,
    RequirementType,
)
from reqtrace.models.requirement_history import HistoryAction, RequirementHistory
from reqtrace.models.stakeholder import Stakeholder
from reqtrace.models.task import Task
from reqtrace.models.user import User
from reqtrace.schemas.requirement import RequirementCreate, RequirementUpdate
from reqtrace.services import history, linkage
from reqtrace.services.access import load_project, require, resolve_access
from reqtrace.services.projections import (
    brief,
    meeting_payload,
    participants_by_meeting,
    task_payload,
    users_by_id,
)

logger = logging.getLogger(__name__)

# Comentarios que acompañan a cada requisito en el listado
LIST_COMMENT_LIMIT = 3

# Tablas que cuelgan de requirement_id y se borran con el requisito
DEPENDENT_MODELS = (
    RequirementHistory,
    RequirementComment,
    RequirementAttachment,
    StakeholderRequirement,
    RequirementTask,
    MeetingRequirement,
)


def load_requirement(session: Session, requirement_id: int) -> Requirement:
    requirement = session.get(Requirement, requirement_id)
    if not requirement:
        raise NotFoundError("Requirement not found")
    return requirement


def _access_for(session: Session, user_id: int, requirement: Requirement):
    return resolve_access(session, user_id, session.get(Project, requirement.project_id))


def create_requirement(session: Session, data: RequirementCreate, user_id: int) -> Requirement:
    project = load_project(session, data.project_id)
    access = resolve_access(session, user_id, project)
    require(access.can_contribute, "You don't have permission to create requirements in this project")

    if not data.title or not data.title.strip():
        raise ValidationError("Title is required")

    stakeholder_ids = linkage.unique_ids(data.stakeholder_ids)
    linkage.ensure_in_project(session, Stakeholder, stakeholder_ids, project.id, "Stakeholder")

    # Los campos omitidos toman el valor por defecto del modelo
    fields = data.dict(exclude_none=True, exclude={"project_id", "stakeholder_ids"})
    requirement = Requirement(**fields, project_id=project.id, owner_id=user_id)
    session.add(requirement)
    session.flush()

    history.record(
        session,
        requirement.id,
        user_id,
        HistoryAction.CREATED,
        requirement.version,
        history.snapshot(requirement),
    )
    linkage.link_stakeholders(session, requirement.id, stakeholder_ids)
    session.commit()
    session.refresh(requirement)
    logger.info("Requirement %s created in project %s by user %s", requirement.id, project.id, user_id)
    return requirement


def list_requirements(
    session: Session,
    project_id: int,
    user_id: int,
    status: Optional[RequirementStatus] = None,
    priority: Optional[Priority] = None,
    type: Optional[RequirementType] = None,
) -> List[dict]:
    project = load_project(session, project_id)
    access = resolve_access(session, user_id, project)
    require(access.can_read, "You don't have access to this project")

    q = select(Requirement).where(Requirement.project_id == project_id)
    if status:
        q = q.where(Requirement.status == status)
    if priority:
        q = q.where(Requirement.priority == priority)
    if type:
        q = q.where(Requirement.type == type)
    # Más recientes primero (la matriz usa el orden inverso)
    q = q.order_by(col(Requirement.created_at).desc(), col(Requirement.id).desc())
    return build_requirement_views(session, session.exec(q).all(), comment_limit=LIST_COMMENT_LIMIT)


def get_requirement_detail(session: Session, requirement_id: int, user_id: int) -> dict:
    requirement = load_requirement(session, requirement_id)
    access = _access_for(session, user_id, requirement)
    require(access.can_read, "You don't have access to this requirement")
    return build_requirement_detail(session, requirement)


def build_requirement_detail(session: Session, requirement: Requirement) -> dict:
    return build_requirement_views(session, [requirement], with_history=True)[0]


def build_requirement_views(
    session: Session,
    requirements: List[Requirement],
    comment_limit: Optional[int] = None,
    with_history: bool = False,
) -> List[dict]:
    """
    Proyección de requisitos con owner, stakeholders, adjuntos, comentarios
    (los más recientes primero) y vínculos con tareas y reuniones.

    Las consultas van por lotes sobre todos los ids, no una por requisito.
    """
    ids = [r.id for r in requirements]
    if not ids:
        return []

    stakeholder_rows = session.exec(
        select(StakeholderRequirement, Stakeholder)
        .join(Stakeholder, StakeholderRequirement.stakeholder_id == Stakeholder.id)
        .where(col(StakeholderRequirement.requirement_id).in_(ids))
        .order_by(StakeholderRequirement.id)
    ).all()
    attachments = session.exec(
        select(RequirementAttachment)
        .where(col(RequirementAttachment.requirement_id).in_(ids))
        .order_by(RequirementAttachment.created_at, RequirementAttachment.id)
    ).all()
    comments = session.exec(
        select(RequirementComment)
        .where(col(RequirementComment.requirement_id).in_(ids))
        .order_by(col(RequirementComment.created_at).desc(), col(RequirementComment.id).desc())
    ).all()
    entries = []
    if with_history:
        entries = session.exec(
            select(RequirementHistory)
            .where(col(RequirementHistory.requirement_id).in_(ids))
            .order_by(col(RequirementHistory.created_at).desc(), col(RequirementHistory.id).desc())
        ).all()
    task_rows = session.exec(
        select(RequirementTask, Task)
        .join(Task, RequirementTask.task_id == Task.id)
        .where(col(RequirementTask.requirement_id).in_(ids))
        .order_by(RequirementTask.id)
    ).all()
    meeting_rows = session.exec(
        select(MeetingRequirement, Meeting)
        .join(Meeting, MeetingRequirement.meeting_id == Meeting.id)
        .where(col(MeetingRequirement.requirement_id).in_(ids))
        .order_by(MeetingRequirement.id)
    ).all()

    by_requirement = defaultdict(lambda: defaultdict(list))
    for link, s in stakeholder_rows:
        by_requirement[link.requirement_id]["stakeholders"].append({"role": link.role, "stakeholder": s.dict()})
    for a in attachments:
        by_requirement[a.requirement_id]["attachments"].append(a.dict())
    for c in comments:
        bucket = by_requirement[c.requirement_id]["comments"]
        if comment_limit is None or len(bucket) < comment_limit:
            bucket.append(c)
    for h in entries:
        by_requirement[h.requirement_id]["history"].append(h)

    users = users_by_id(
        session,
        [r.owner_id for r in requirements]
        + [c.user_id for c in comments]
        + [h.user_id for h in entries]
        + [t.assignee_id for _, t in task_rows],
    )
    participants = participants_by_meeting(session, [m.id for _, m in meeting_rows])

    for link, task in task_rows:
        by_requirement[link.requirement_id]["task_links"].append(
            {
                "id": link.id,
                "requirement_id": link.requirement_id,
                "created_at": link.created_at,
                "task": task_payload(task, users),
            }
        )
    for link, m in meeting_rows:
        by_requirement[link.requirement_id]["meeting_links"].append(
            {"meeting": meeting_payload(m, participants.get(m.id, []))}
        )

    views = []
    for r in requirements:
        related = by_requirement[r.id]
        view = r.dict()
        view["owner"] = brief(users.get(r.owner_id))
        view["stakeholders"] = related["stakeholders"]
        view["attachments"] = related["attachments"]
        view["comments"] = [{**c.dict(), "user": brief(users.get(c.user_id))} for c in related["comments"]]
        view["task_links"] = related["task_links"]
        view["meeting_links"] = related["meeting_links"]
        if with_history:
            view["history"] = [{**h.dict(), "user": brief(users.get(h.user_id))} for h in related["history"]]
        views.append(view)
    return views


def update_requirement(session: Session, requirement_id: int, data: RequirementUpdate, user_id: int) -> Requirement:
    requirement = load_requirement(session, requirement_id)
    access = _access_for(session, user_id, requirement)
    require(
        access.can_edit_requirement(requirement, user_id),
        "You don't have permission to update this requirement",
    )

    # null explícito sólo tiene sentido en description
    updates = {
        k: v for k, v in data.dict(exclude_unset=True).items() if v is not None or k == "description"
    }
    if "title" in updates and not updates["title"].strip():
        raise ValidationError("Title cannot be empty")

    changes = history.diff_fields(requirement, updates)
    if not changes:
        raise ValidationError("No changes detected")

    action = history.resolve_action(changes)
    expected_version = requirement.version
    new_version = expected_version + 1
    values = {c.field: updates[c.field] for c in changes}

    # Escritura condicionada a la versión leída: si otro la cambió, no se toca nada
    result = session.exec(
        update(Requirement)
        .where(Requirement.id == requirement.id)
        .where(Requirement.version == expected_version)
        .values(**values, version=new_version, updated_at=datetime.utcnow())
    )
    if result.rowcount != 1:
        session.rollback()
        logger.warning(
            "Concurrent update on requirement %s (expected version %s)", requirement_id, expected_version
        )
        raise ConflictError("Requirement was modified by someone else, reload and try again")

    history.record(session, requirement.id, user_id, action, new_version, changes)
    session.commit()
    session.refresh(requirement)
    logger.info(
        "Requirement %s updated to v%s (%s) by user %s", requirement.id, new_version, action.value, user_id
    )
    return requirement


def purge_requirements(session: Session, requirement_ids: List[int]) -> None:
    """Borra requisitos y sus filas dependientes; no hace commit."""
    if not requirement_ids:
        return
    for model in DEPENDENT_MODELS:
        session.exec(delete(model).where(col(model.requirement_id).in_(requirement_ids)))
    session.exec(delete(Requirement).where(col(Requirement.id).in_(requirement_ids)))


def delete_requirement(session: Session, requirement_id: int, user_id: int) -> None:
    requirement = load_requirement(session, requirement_id)
    access = _access_for(session, user_id, requirement)
    require(access.can_manage, "You don't have permission to delete this requirement")

    purge_requirements(session, [requirement.id])
    session.commit()
    logger.info("Requirement %s deleted by user %s", requirement_id, user_id)


def add_comment(session: Session, requirement_id: int, content: str, user_id: int) -> dict:
    if not content or not content.strip():
        raise ValidationError("Comment content is required")

    requirement = load_requirement(session, requirement_id)
    access = _access_for(session, user_id, requirement)
    require(access.can_read, "You don't have access to comment on this requirement")

    comment = RequirementComment(requirement_id=requirement.id, user_id=user_id, content=content)
    session.add(comment)
    session.commit()
    session.refresh(comment)
    return {**comment.dict(), "user": brief(session.get(User, user_id))}
