import logging
from collections import defaultdict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select, col
from typing import List

from reqtrace.api.endpoints.auth import get_current_user
from reqtrace.database import get_session
from reqtrace.models.links import MeetingParticipant, MeetingRequirement, StakeholderRequirement
from reqtrace.models.meeting import Meeting
from reqtrace.models.requirement import Requirement
from reqtrace.models.stakeholder import Stakeholder
from reqtrace.models.user import User
from reqtrace.schemas.meeting import MeetingCreate, MeetingDetail
from reqtrace.schemas.stakeholder import (
    StakeholderCreate,
    StakeholderRead,
    StakeholderUpdate,
    StakeholderWithLinks,
)
from reqtrace.services import linkage
from reqtrace.services.access import load_project, require, resolve_access
from reqtrace.services.project_service import purge_stakeholders
from reqtrace.services.projections import meeting_payload, participants_by_meeting

logger = logging.getLogger(__name__)

router = APIRouter()


def _load_stakeholder(session: Session, stakeholder_id: int) -> Stakeholder:
    stakeholder = session.get(Stakeholder, stakeholder_id)
    if not stakeholder:
        raise HTTPException(status_code=404, detail="Stakeholder not found")
    return stakeholder


def _meeting_requirements(session: Session, meeting_ids: List[int]):
    out = defaultdict(list)
    if not meeting_ids:
        return out
    rows = session.exec(
        select(MeetingRequirement, Requirement)
        .join(Requirement, MeetingRequirement.requirement_id == Requirement.id)
        .where(col(MeetingRequirement.meeting_id).in_(meeting_ids))
        .order_by(MeetingRequirement.id)
    ).all()
    for link, r in rows:
        out[link.meeting_id].append({"id": r.id, "title": r.title})
    return out


@router.post("", response_model=StakeholderRead, status_code=status.HTTP_201_CREATED)
def create_stakeholder(
    stakeholder_in: StakeholderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, stakeholder_in.project_id)
    require(
        resolve_access(session, current_user.id, project).can_manage,
        "You don't have permission to create stakeholders in this project",
    )
    if not stakeholder_in.name.strip():
        raise HTTPException(status_code=400, detail="Stakeholder name is required")

    stakeholder = Stakeholder(**stakeholder_in.dict())
    session.add(stakeholder)
    session.commit()
    session.refresh(stakeholder)
    logger.info("Stakeholder %s created in project %s", stakeholder.id, project.id)
    return stakeholder


@router.get("/project/{project_id}", response_model=List[StakeholderWithLinks])
def list_stakeholders(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, project_id)
    require(resolve_access(session, current_user.id, project).can_read, "You don't have access to this project")

    stakeholders = session.exec(
        select(Stakeholder).where(Stakeholder.project_id == project_id).order_by(Stakeholder.id)
    ).all()
    ids = [s.id for s in stakeholders]
    requirements = defaultdict(list)
    meetings = defaultdict(list)
    if ids:
        for link, r in session.exec(
            select(StakeholderRequirement, Requirement)
            .join(Requirement, StakeholderRequirement.requirement_id == Requirement.id)
            .where(col(StakeholderRequirement.stakeholder_id).in_(ids))
            .order_by(StakeholderRequirement.id)
        ).all():
            requirements[link.stakeholder_id].append({"id": r.id, "title": r.title})
        for link, m in session.exec(
            select(MeetingParticipant, Meeting)
            .join(Meeting, MeetingParticipant.meeting_id == Meeting.id)
            .where(col(MeetingParticipant.stakeholder_id).in_(ids))
            .order_by(MeetingParticipant.id)
        ).all():
            meetings[link.stakeholder_id].append({"id": m.id, "title": m.title})

    return [
        {**s.dict(), "requirements": requirements.get(s.id, []), "meetings": meetings.get(s.id, [])}
        for s in stakeholders
    ]


@router.put("/{stakeholder_id}", response_model=StakeholderRead)
def update_stakeholder(
    stakeholder_id: int,
    stakeholder_in: StakeholderUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    stakeholder = _load_stakeholder(session, stakeholder_id)
    project = load_project(session, stakeholder.project_id)
    require(
        resolve_access(session, current_user.id, project).can_manage,
        "You don't have permission to update this stakeholder",
    )
    data = stakeholder_in.dict(exclude_unset=True)
    if "name" in data and not (data["name"] or "").strip():
        raise HTTPException(status_code=400, detail="Stakeholder name is required")
    for key, value in data.items():
        setattr(stakeholder, key, value)
    session.add(stakeholder)
    session.commit()
    session.refresh(stakeholder)
    return stakeholder


@router.delete("/{stakeholder_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stakeholder(
    stakeholder_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    stakeholder = _load_stakeholder(session, stakeholder_id)
    project = load_project(session, stakeholder.project_id)
    require(
        resolve_access(session, current_user.id, project).can_manage,
        "You don't have permission to delete this stakeholder",
    )
    purge_stakeholders(session, [stakeholder.id])
    session.commit()


@router.post("/meetings", response_model=MeetingDetail, status_code=status.HTTP_201_CREATED)
def create_meeting(
    meeting_in: MeetingCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, meeting_in.project_id)
    require(
        resolve_access(session, current_user.id, project).can_read,
        "You don't have permission to create meetings in this project",
    )
    if not meeting_in.title.strip():
        raise HTTPException(status_code=400, detail="Meeting title is required")

    participant_ids = linkage.unique_ids(meeting_in.participant_ids)
    requirement_ids = linkage.unique_ids(meeting_in.requirement_ids)
    linkage.ensure_in_project(session, Stakeholder, participant_ids, project.id, "Stakeholder")
    linkage.ensure_in_project(session, Requirement, requirement_ids, project.id, "Requirement")

    meeting = Meeting(**meeting_in.dict(exclude={"participant_ids", "requirement_ids"}))
    session.add(meeting)
    session.flush()
    linkage.link_meeting(session, meeting.id, participant_ids, requirement_ids)
    session.commit()
    session.refresh(meeting)
    logger.info("Meeting %s created in project %s", meeting.id, project.id)

    participants = participants_by_meeting(session, [meeting.id])
    detail = meeting_payload(meeting, participants.get(meeting.id, []))
    detail["requirements"] = _meeting_requirements(session, [meeting.id]).get(meeting.id, [])
    return detail


@router.get("/meetings/project/{project_id}", response_model=List[MeetingDetail])
def list_meetings(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, project_id)
    require(resolve_access(session, current_user.id, project).can_read, "You don't have access to this project")

    meetings = session.exec(
        select(Meeting)
        .where(Meeting.project_id == project_id)
        .order_by(col(Meeting.meeting_date).desc(), col(Meeting.id).desc())
    ).all()
    ids = [m.id for m in meetings]
    participants = participants_by_meeting(session, ids)
    requirements = _meeting_requirements(session, ids)
    return [
        {**meeting_payload(m, participants.get(m.id, [])), "requirements": requirements.get(m.id, [])}
        for m in meetings
    ]
