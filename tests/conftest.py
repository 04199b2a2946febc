import sys
import os
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("database_url", "sqlite:///:memory:")
os.environ.setdefault("secret_key", "testsecret")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

import reqtrace.init_db  # noqa
from reqtrace.main import app
from reqtrace.api.endpoints.auth import get_current_user
from reqtrace.database import get_session
from reqtrace.models.project import Project, ProjectMember
from reqtrace.models.stakeholder import Stakeholder
from reqtrace.models.task import Task
from reqtrace.models.user import User
from reqtrace.models.workspace import Workspace, WorkspaceMember, WorkspaceRole


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def act_as():
    def _act_as(user):
        app.dependency_overrides[get_current_user] = lambda: user
    return _act_as


@pytest.fixture
def world(engine):
    """
    Workspace con dos proyectos:
      admin    -> ADMIN del workspace
      lead     -> team lead de ambos proyectos (y miembro de project)
      member   -> miembro de project
      viewer   -> miembro del workspace, no del proyecto
      outsider -> sin relación
    """
    with Session(engine, expire_on_commit=False) as session:
        admin = User(id=1, name="Ada Admin", email="ada@example.com")
        lead = User(id=2, name="Luis Lead", email="luis@example.com")
        member = User(id=3, name="Marta Member", email="marta@example.com")
        viewer = User(id=4, name="Victor Viewer", email="victor@example.com")
        outsider = User(id=5, name="Olga Outsider", email="olga@example.com")
        session.add_all([admin, lead, member, viewer, outsider])

        workspace = Workspace(id=1, name="Acme", owner_id=1)
        other_workspace = Workspace(id=2, name="Other", owner_id=5)
        session.add_all([workspace, other_workspace])
        session.add_all([
            WorkspaceMember(workspace_id=1, user_id=1, role=WorkspaceRole.ADMIN),
            WorkspaceMember(workspace_id=1, user_id=2, role=WorkspaceRole.MEMBER),
            WorkspaceMember(workspace_id=1, user_id=3, role=WorkspaceRole.MEMBER),
            WorkspaceMember(workspace_id=1, user_id=4, role=WorkspaceRole.MEMBER),
            WorkspaceMember(workspace_id=2, user_id=5, role=WorkspaceRole.ADMIN),
        ])

        project = Project(id=1, workspace_id=1, name="Portal", team_lead=2)
        other_project = Project(id=2, workspace_id=1, name="Backoffice", team_lead=2)
        session.add_all([project, other_project])
        session.add_all([
            ProjectMember(project_id=1, user_id=2),
            ProjectMember(project_id=1, user_id=3),
        ])

        session.add_all([
            Task(id=1, project_id=1, title="Build login form", assignee_id=3),
            Task(id=2, project_id=2, title="Export report"),
            Task(id=3, project_id=1, title="Unassigned spike"),
        ])
        session.add_all([
            Stakeholder(id=1, project_id=1, name="Carla Client", role="Sponsor"),
            Stakeholder(id=2, project_id=2, name="Other Sponsor"),
        ])
        session.commit()

    return SimpleNamespace(
        admin=admin,
        lead=lead,
        member=member,
        viewer=viewer,
        outsider=outsider,
        project_id=1,
        other_project_id=2,
        task_id=1,
        other_task_id=2,
        unassigned_task_id=3,
        stakeholder_id=1,
        other_stakeholder_id=2,
        now=datetime.utcnow(),
    )
