from sqlmodel import Session

from reqtrace.models.project import Project
from reqtrace.models.requirement import Requirement
from reqtrace.services.access import resolve_access


def test_flags_per_role(engine, world):
    with Session(engine) as session:
        project = session.get(Project, world.project_id)

        admin = resolve_access(session, world.admin.id, project)
        lead = resolve_access(session, world.lead.id, project)
        member = resolve_access(session, world.member.id, project)
        viewer = resolve_access(session, world.viewer.id, project)
        outsider = resolve_access(session, world.outsider.id, project)

    assert admin.is_workspace_admin and admin.is_workspace_member and not admin.is_project_member
    assert lead.is_project_lead and lead.is_project_member and not lead.is_workspace_admin
    assert member.is_project_member and not member.is_project_lead
    assert viewer.is_workspace_member and not viewer.is_project_member
    assert not any([outsider.is_workspace_member, outsider.is_project_member,
                    outsider.is_workspace_admin, outsider.is_project_lead])


def test_capabilities(engine, world):
    with Session(engine) as session:
        project = session.get(Project, world.project_id)
        access = {u.name: resolve_access(session, u.id, project)
                  for u in (world.admin, world.lead, world.member, world.viewer, world.outsider)}

    assert [a.can_read for a in access.values()] == [True, True, True, True, False]
    assert [a.can_contribute for a in access.values()] == [True, True, True, False, False]
    assert [a.can_manage for a in access.values()] == [True, True, False, False, False]


def test_owner_can_edit_own_requirement_only(engine, world):
    own = Requirement(title="Mine", project_id=world.project_id, owner_id=world.member.id)
    theirs = Requirement(title="Theirs", project_id=world.project_id, owner_id=world.lead.id)
    with Session(engine) as session:
        access = resolve_access(session, world.member.id, session.get(Project, world.project_id))

    assert access.can_edit_requirement(own, world.member.id)
    assert not access.can_edit_requirement(theirs, world.member.id)


def test_missing_project_yields_no_flags(engine, world):
    with Session(engine) as session:
        access = resolve_access(session, world.admin.id, None)
    assert not access.can_read and not access.can_manage
