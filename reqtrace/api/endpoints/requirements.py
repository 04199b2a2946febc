# api/endpoints/requirements.py

from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List, Optional

from reqtrace.api.endpoints.auth import get_current_user
from reqtrace.database import get_session
from reqtrace.models.requirement import Priority, RequirementStatus, RequirementType
from reqtrace.models.user import User
from reqtrace.schemas.requirement import (
    CommentCreate,
    CommentRead,
    RequirementCreate,
    RequirementDetail,
    RequirementListItem,
    RequirementUpdate,
    TaskLinkRead,
    TaskLinkRequest,
)
from reqtrace.schemas.traceability import TraceabilityMatrix
from reqtrace.services import linkage, requirement_service, traceability

router = APIRouter()


@router.post("", response_model=RequirementDetail, status_code=status.HTTP_201_CREATED)
def create_requirement(
    requirement_in: RequirementCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    requirement = requirement_service.create_requirement(session, requirement_in, current_user.id)
    return requirement_service.build_requirement_detail(session, requirement)


@router.get("/project/{project_id}", response_model=List[RequirementListItem])
def list_requirements(
    project_id: int,
    status: Optional[RequirementStatus] = None,
    priority: Optional[Priority] = None,
    type: Optional[RequirementType] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return requirement_service.list_requirements(
        session, project_id, current_user.id, status=status, priority=priority, type=type
    )


@router.get("/project/{project_id}/traceability-matrix", response_model=TraceabilityMatrix)
def get_traceability_matrix(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return traceability.build_matrix(session, project_id, current_user.id)


@router.get("/{requirement_id}", response_model=RequirementDetail)
def get_requirement(
    requirement_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return requirement_service.get_requirement_detail(session, requirement_id, current_user.id)


@router.put("/{requirement_id}", response_model=RequirementDetail)
def update_requirement(
    requirement_id: int,
    requirement_in: RequirementUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    requirement = requirement_service.update_requirement(session, requirement_id, requirement_in, current_user.id)
    return requirement_service.build_requirement_detail(session, requirement)


@router.delete("/{requirement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_requirement(
    requirement_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    requirement_service.delete_requirement(session, requirement_id, current_user.id)


@router.post("/{requirement_id}/comment", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
def add_comment(
    requirement_id: int,
    comment_in: CommentCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return requirement_service.add_comment(session, requirement_id, comment_in.content, current_user.id)


@router.post("/{requirement_id}/link-task", response_model=TaskLinkRead, status_code=status.HTTP_201_CREATED)
def link_task(
    requirement_id: int,
    link_in: TaskLinkRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return linkage.link_task(session, requirement_id, link_in.task_id, current_user.id)
