from sqlmodel import Session, select

from reqtrace.models.links import RequirementTask


def test_create_and_list_tasks(client, world, act_as):
    act_as(world.member)

    created = client.post(
        "/api/tasks", json={"project_id": 1, "title": "Write tests", "assignee_id": world.lead.id}
    )

    assert created.status_code == 201
    assert created.json()["status"] == "TODO"
    assert created.json()["assignee"]["name"] == "Luis Lead"
    titles = [t["title"] for t in client.get("/api/tasks/project/1").json()]
    assert titles[0] == "Write tests"
    assert set(titles) == {"Write tests", "Build login form", "Unassigned spike"}


def test_task_permissions_and_assignee_validation(client, world, act_as):
    act_as(world.viewer)
    assert client.post("/api/tasks", json={"project_id": 1, "title": "x"}).status_code == 403
    act_as(world.lead)
    bad = client.post("/api/tasks", json={"project_id": 1, "title": "x", "assignee_id": world.outsider.id})
    assert bad.status_code == 400


def test_update_task(client, world, act_as):
    act_as(world.member)
    response = client.put(f"/api/tasks/{world.task_id}", json={"status": "IN_PROGRESS", "assignee_id": None})
    assert response.status_code == 200
    assert response.json()["status"] == "IN_PROGRESS"
    assert response.json()["assignee"] is None
    assert client.put("/api/tasks/999", json={"status": "DONE"}).status_code == 404


def test_delete_task_removes_requirement_links(client, engine, world, act_as):
    act_as(world.lead)
    rid = client.post("/api/requirements", json={"project_id": 1, "title": "R"}).json()["id"]
    client.post(f"/api/requirements/{rid}/link-task", json={"task_id": world.task_id})

    act_as(world.member)
    assert client.delete(f"/api/tasks/{world.task_id}").status_code == 403
    act_as(world.lead)
    assert client.delete(f"/api/tasks/{world.task_id}").status_code == 204

    with Session(engine) as session:
        assert session.exec(select(RequirementTask)).all() == []
    detail = client.get(f"/api/requirements/{rid}").json()
    assert detail["task_links"] == []
