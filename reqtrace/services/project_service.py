import logging
from typing import List

from sqlmodel import Session, select, delete, col

from reqtrace.models.links import MeetingParticipant, MeetingRequirement, RequirementTask, StakeholderRequirement
from reqtrace.models.meeting import Meeting
from reqtrace.models.project import Project, ProjectMember
from reqtrace.models.requirement import Requirement
from reqtrace.models.stakeholder import Stakeholder
from reqtrace.models.task import Task
from reqtrace.services.requirement_service import purge_requirements

logger = logging.getLogger(__name__)


def purge_tasks(session: Session, task_ids: List[int]) -> None:
    if not task_ids:
        return
    session.exec(delete(RequirementTask).where(col(RequirementTask.task_id).in_(task_ids)))
    session.exec(delete(Task).where(col(Task.id).in_(task_ids)))


def purge_stakeholders(session: Session, stakeholder_ids: List[int]) -> None:
    if not stakeholder_ids:
        return
    session.exec(delete(StakeholderRequirement).where(col(StakeholderRequirement.stakeholder_id).in_(stakeholder_ids)))
    session.exec(delete(MeetingParticipant).where(col(MeetingParticipant.stakeholder_id).in_(stakeholder_ids)))
    session.exec(delete(Stakeholder).where(col(Stakeholder.id).in_(stakeholder_ids)))


def purge_meetings(session: Session, meeting_ids: List[int]) -> None:
    if not meeting_ids:
        return
    session.exec(delete(MeetingParticipant).where(col(MeetingParticipant.meeting_id).in_(meeting_ids)))
    session.exec(delete(MeetingRequirement).where(col(MeetingRequirement.meeting_id).in_(meeting_ids)))
    session.exec(delete(Meeting).where(col(Meeting.id).in_(meeting_ids)))


def delete_project(session: Session, project: Project) -> None:
    """Borra el proyecto y todo lo que cuelga de él en una sola transacción."""
    pid = project.id

    def ids_of(model) -> List[int]:
        return list(session.exec(select(model.id).where(model.project_id == pid)).all())

    purge_requirements(session, ids_of(Requirement))
    purge_meetings(session, ids_of(Meeting))
    purge_stakeholders(session, ids_of(Stakeholder))
    purge_tasks(session, ids_of(Task))
    session.exec(delete(ProjectMember).where(ProjectMember.project_id == pid))
    session.delete(project)
    session.commit()
    logger.info("Project %s deleted with all dependent rows", pid)
