import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select, col
from typing import List, Optional

from reqtrace.api.endpoints.auth import get_current_user
from reqtrace.database import get_session
from reqtrace.models.project import Project
from reqtrace.models.task import Task
from reqtrace.models.user import User
from reqtrace.schemas.task import TaskCreate, TaskUpdate, TaskWithAssignee
from reqtrace.services.access import load_project, require, resolve_access
from reqtrace.services.project_service import purge_tasks
from reqtrace.services.projections import task_payload, users_by_id

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_assignee(session: Session, project: Project, assignee_id: Optional[int]) -> None:
    if assignee_id is None:
        return
    if not resolve_access(session, assignee_id, project).can_read:
        raise HTTPException(status_code=400, detail="Assignee must be a member of this project")


def _load_task(session: Session, task_id: int) -> Task:
    task = session.get(Task, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.post("", response_model=TaskWithAssignee, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: TaskCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, task_in.project_id)
    require(
        resolve_access(session, current_user.id, project).can_contribute,
        "You don't have permission to create tasks in this project",
    )
    if not task_in.title.strip():
        raise HTTPException(status_code=400, detail="Task title is required")
    _check_assignee(session, project, task_in.assignee_id)

    task = Task(**task_in.dict(exclude_none=True))
    session.add(task)
    session.commit()
    session.refresh(task)
    logger.info("Task %s created in project %s", task.id, project.id)
    return task_payload(task, users_by_id(session, [task.assignee_id]))


@router.get("/project/{project_id}", response_model=List[TaskWithAssignee])
def list_tasks(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project = load_project(session, project_id)
    require(resolve_access(session, current_user.id, project).can_read, "You don't have access to this project")
    tasks = session.exec(
        select(Task)
        .where(Task.project_id == project_id)
        .order_by(col(Task.created_at).desc(), col(Task.id).desc())
    ).all()
    users = users_by_id(session, [t.assignee_id for t in tasks])
    return [task_payload(t, users) for t in tasks]


@router.put("/{task_id}", response_model=TaskWithAssignee)
def update_task(
    task_id: int,
    task_in: TaskUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    task = _load_task(session, task_id)
    project = load_project(session, task.project_id)
    require(
        resolve_access(session, current_user.id, project).can_contribute,
        "You don't have permission to update this task",
    )
    task_data = task_in.dict(exclude_unset=True)
    if "assignee_id" in task_data:
        _check_assignee(session, project, task_data["assignee_id"])
    for key, value in task_data.items():
        if value is None and key not in ("description", "assignee_id", "due_date"):
            continue
        setattr(task, key, value)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task_payload(task, users_by_id(session, [task.assignee_id]))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    task = _load_task(session, task_id)
    project = load_project(session, task.project_id)
    require(
        resolve_access(session, current_user.id, project).can_manage,
        "You don't have permission to delete this task",
    )
    purge_tasks(session, [task.id])
    session.commit()
