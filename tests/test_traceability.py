from datetime import datetime

from sqlmodel import Session

from reqtrace.models.links import MeetingRequirement, RequirementTask, StakeholderRequirement
from reqtrace.models.meeting import Meeting
from reqtrace.models.requirement import Requirement


def seed_requirements(engine):
    with Session(engine) as session:
        session.add_all([
            Requirement(id=1, title="Search", project_id=1, owner_id=2, created_at=datetime(2026, 1, 2)),
            Requirement(id=2, title="Login", project_id=1, owner_id=3, type="BUSINESS",
                        created_at=datetime(2026, 1, 1)),
            Requirement(id=3, title="Audit log", project_id=1, owner_id=2, created_at=datetime(2026, 1, 3)),
            Requirement(id=4, title="Other project", project_id=2, owner_id=2),
        ])
        session.add(Meeting(id=1, project_id=1, title="Kick-off", meeting_date=datetime(2026, 2, 1, 10)))
        session.add_all([
            StakeholderRequirement(requirement_id=2, stakeholder_id=1, role="APPROVER"),
            RequirementTask(requirement_id=2, task_id=1),
            RequirementTask(requirement_id=2, task_id=3),
            MeetingRequirement(meeting_id=1, requirement_id=2),
        ])
        session.commit()


def test_matrix_is_oldest_first_while_list_is_newest_first(client, engine, world, act_as):
    seed_requirements(engine)
    act_as(world.viewer)

    matrix = client.get("/api/requirements/project/1/traceability-matrix").json()
    listing = client.get("/api/requirements/project/1").json()

    assert [row["id"] for row in matrix["matrix"]] == [2, 1, 3]
    assert [r["id"] for r in listing] == [3, 1, 2]


def test_matrix_composes_links(client, engine, world, act_as):
    seed_requirements(engine)
    act_as(world.member)

    body = client.get("/api/requirements/project/1/traceability-matrix").json()

    assert body["project"] == {"id": 1, "name": "Portal"}
    login = body["matrix"][0]
    assert login["owner"] == "Marta Member"
    assert login["type"] == "BUSINESS"
    assert login["stakeholders"] == [{"id": 1, "name": "Carla Client", "role": "APPROVER"}]
    assert login["tasks"] == [
        {"id": 1, "title": "Build login form", "status": "TODO", "assignee": "Marta Member"},
        {"id": 3, "title": "Unassigned spike", "status": "TODO", "assignee": None},
    ]
    assert login["meetings"][0]["title"] == "Kick-off"
    assert body["matrix"][1]["tasks"] == [] and body["matrix"][1]["meetings"] == []


def test_matrix_access(client, world, act_as):
    act_as(world.outsider)
    assert client.get("/api/requirements/project/1/traceability-matrix").status_code == 403
    act_as(world.admin)
    assert client.get("/api/requirements/project/99/traceability-matrix").status_code == 404
    empty = client.get("/api/requirements/project/2/traceability-matrix")
    assert empty.status_code == 200
    assert empty.json()["matrix"] == []
