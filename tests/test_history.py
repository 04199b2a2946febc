import pytest

from reqtrace.models.requirement import Priority, Requirement, RequirementStatus, RequirementType
from reqtrace.models.requirement_history import HistoryAction
from reqtrace.models.task import Task
from reqtrace.services import history


def make_requirement(**kwargs):
    fields = dict(title="Login flow", project_id=1, owner_id=1)
    fields.update(kwargs)
    return Requirement(**fields)


def test_snapshot_lists_every_tracked_field_with_null_old():
    snap = history.snapshot(make_requirement(description="Users sign in"))
    assert [c.field for c in snap] == list(history.TRACKED_FIELDS)
    assert all(c.old is None for c in snap)
    assert {c.field: c.new for c in snap}["status"] == "DRAFT"


def test_diff_skips_unchanged_and_unsent_fields():
    req = make_requirement(priority=Priority.HIGH)
    changes = history.diff_fields(req, {"title": "Login flow", "priority": Priority.LOW})
    assert [c.dict() for c in changes] == [{"field": "priority", "old": "HIGH", "new": "LOW"}]


def test_diff_keeps_field_order():
    req = make_requirement()
    changes = history.diff_fields(
        req, {"status": RequirementStatus.REVIEW, "title": "SSO login", "type": RequirementType.TECHNICAL}
    )
    assert [c.field for c in changes] == ["title", "type", "status"]


@pytest.mark.parametrize(
    "fields, expected",
    [
        ({"status", "priority", "title"}, HistoryAction.STATUS_CHANGED),
        ({"priority", "description"}, HistoryAction.PRIORITY_CHANGED),
        ({"title"}, HistoryAction.UPDATED),
    ],
)
def test_action_precedence(fields, expected):
    changes = [history.FieldChange(field=f, old="a", new="b") for f in fields]
    assert history.resolve_action(changes) == expected


def test_task_link_changes_carry_id_and_title():
    changes = history.task_link_changes(Task(id=9, project_id=1, title="Build form"))
    assert [(c.field, c.new) for c in changes] == [("task_id", 9), ("task_title", "Build form")]
