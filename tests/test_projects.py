from sqlmodel import Session, select

from reqtrace.models.links import MeetingParticipant, RequirementTask
from reqtrace.models.meeting import Meeting
from reqtrace.models.project import Project, ProjectMember
from reqtrace.models.requirement import Requirement
from reqtrace.models.requirement_history import RequirementHistory
from reqtrace.models.stakeholder import Stakeholder
from reqtrace.models.task import Task
from reqtrace.models.workspace import WorkspaceMember


def test_create_workspace_makes_creator_admin(client, engine, world, act_as):
    act_as(world.outsider)

    response = client.post("/api/workspaces", json={"name": "New"})

    assert response.status_code == 201
    wid = response.json()["id"]
    with Session(engine) as session:
        member = session.exec(select(WorkspaceMember).where(WorkspaceMember.workspace_id == wid)).one()
    assert member.user_id == world.outsider.id and member.role == "ADMIN"
    names = [w["name"] for w in client.get("/api/workspaces").json()]
    assert names == ["Other", "New"]


def test_add_workspace_member_is_admin_only(client, world, act_as):
    act_as(world.lead)
    assert client.post("/api/workspaces/1/members", json={"user_id": 5}).status_code == 403

    act_as(world.admin)
    assert client.post("/api/workspaces/1/members", json={"user_id": 5}).status_code == 201
    assert client.post("/api/workspaces/1/members", json={"user_id": 5}).status_code == 400
    assert client.post("/api/workspaces/1/members", json={"user_id": 99}).status_code == 404


def test_create_project_defaults_lead_to_creator(client, engine, world, act_as):
    act_as(world.admin)

    response = client.post("/api/projects", json={"workspace_id": 1, "name": "Mobile", "member_ids": [3]})

    assert response.status_code == 201
    project = response.json()
    assert project["team_lead"] == world.admin.id
    with Session(engine) as session:
        members = session.exec(select(ProjectMember.user_id).where(ProjectMember.project_id == project["id"])).all()
    assert sorted(members) == [1, 3]


def test_create_project_permissions(client, world, act_as):
    act_as(world.member)
    assert client.post("/api/projects", json={"workspace_id": 1, "name": "X"}).status_code == 403
    act_as(world.admin)
    bad_member = client.post("/api/projects", json={"workspace_id": 1, "name": "X", "member_ids": [5]})
    assert bad_member.status_code == 400
    assert client.post("/api/projects", json={"workspace_id": 9, "name": "X"}).status_code == 404


def test_list_get_and_update_project(client, world, act_as):
    act_as(world.viewer)
    assert [p["name"] for p in client.get("/api/projects/workspace/1").json()] == ["Portal", "Backoffice"]
    assert client.get("/api/projects/1").json()["name"] == "Portal"
    assert client.put("/api/projects/1", json={"name": "Renamed"}).status_code == 403

    act_as(world.lead)
    updated = client.put("/api/projects/1", json={"name": "Renamed", "team_lead": 3})
    assert updated.status_code == 200
    assert updated.json()["team_lead"] == 3

    act_as(world.outsider)
    assert client.get("/api/projects/1").status_code == 403
    assert client.get("/api/projects/workspace/1").status_code == 404


def test_add_project_member(client, world, act_as):
    act_as(world.lead)
    assert client.post("/api/projects/1/members", json={"user_id": 4}).status_code == 201
    assert client.post("/api/projects/1/members", json={"user_id": 4}).status_code == 400
    assert client.post("/api/projects/1/members", json={"user_id": 5}).status_code == 400

    act_as(world.viewer)
    # ahora es miembro del proyecto y puede crear requisitos
    created = client.post("/api/requirements", json={"project_id": 1, "title": "From viewer"})
    assert created.status_code == 201


def test_delete_project_cascades(client, engine, world, act_as):
    act_as(world.lead)
    rid = client.post(
        "/api/requirements", json={"project_id": 1, "title": "R", "stakeholder_ids": [world.stakeholder_id]}
    ).json()["id"]
    client.post(f"/api/requirements/{rid}/link-task", json={"task_id": world.task_id})
    client.post(
        "/api/stakeholders/meetings",
        json={"project_id": 1, "title": "Sync", "meeting_date": "2026-03-01T09:00:00",
              "participant_ids": [world.stakeholder_id], "requirement_ids": [rid]},
    )

    act_as(world.member)
    assert client.delete("/api/projects/1").status_code == 403

    act_as(world.admin)
    assert client.delete("/api/projects/1").status_code == 204
    assert client.delete("/api/projects/1").status_code == 404

    with Session(engine) as session:
        assert session.get(Project, 1) is None
        assert session.exec(select(Requirement).where(Requirement.project_id == 1)).all() == []
        assert session.exec(select(Task).where(Task.project_id == 1)).all() == []
        assert session.exec(select(Stakeholder).where(Stakeholder.project_id == 1)).all() == []
        assert session.exec(select(Meeting)).all() == []
        assert session.exec(select(MeetingParticipant)).all() == []
        assert session.exec(select(RequirementTask)).all() == []
        assert session.exec(select(RequirementHistory)).all() == []
        assert session.exec(select(ProjectMember).where(ProjectMember.project_id == 1)).all() == []
        # el otro proyecto no se toca
        assert session.get(Project, 2) is not None
        assert session.get(Task, world.other_task_id) is not None


def test_project_name_cannot_be_blank_or_null(client, world, act_as):
    act_as(world.admin)
    assert client.post("/api/projects", json={"workspace_id": 1, "name": "   "}).status_code == 400

    act_as(world.lead)
    assert client.put("/api/projects/1", json={"name": ""}).status_code == 400
    assert client.put("/api/projects/1", json={"name": "  "}).json()["message"] == "Project name is required"

    # null en un campo obligatorio se ignora; en description lo borra
    kept = client.put("/api/projects/1", json={"name": None, "description": None})
    assert kept.status_code == 200
    assert kept.json()["name"] == "Portal"
    assert kept.json()["description"] is None
