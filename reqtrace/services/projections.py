from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select, col

from reqtrace.models.links import MeetingParticipant
from reqtrace.models.meeting import Meeting
from reqtrace.models.stakeholder import Stakeholder
from reqtrace.models.task import Task
from reqtrace.models.user import User


def users_by_id(session: Session, ids: Iterable[Optional[int]]) -> Dict[int, User]:
    wanted = {i for i in ids if i is not None}
    if not wanted:
        return {}
    users = session.exec(select(User).where(col(User.id).in_(wanted))).all()
    return {u.id: u for u in users}


def brief(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "image": user.image}


def task_payload(task: Task, users: Dict[int, User]) -> dict:
    data = task.dict()
    data["assignee"] = brief(users.get(task.assignee_id))
    return data


def participants_by_meeting(session: Session, meeting_ids: List[int]) -> Dict[int, List[Stakeholder]]:
    out: Dict[int, List[Stakeholder]] = defaultdict(list)
    if not meeting_ids:
        return out
    rows = session.exec(
        select(MeetingParticipant, Stakeholder)
        .join(Stakeholder, MeetingParticipant.stakeholder_id == Stakeholder.id)
        .where(col(MeetingParticipant.meeting_id).in_(meeting_ids))
        .order_by(MeetingParticipant.id)
    ).all()
    for link, stakeholder in rows:
        out[link.meeting_id].append(stakeholder)
    return out


def meeting_payload(meeting: Meeting, participants: List[Stakeholder]) -> dict:
    data = meeting.dict()
    data["participants"] = [s.dict() for s in participants]
    return data
