"""
Historial versionado de requisitos.

Cada mutación de un requisito añade exactamente una fila de
``RequirementHistory`` dentro de la misma transacción que el cambio. El diff se
guarda como una lista ordenada de ``{"field", "old", "new"}``:

* CREATED: una entrada por campo con ``old = None`` (instantánea inicial).
* UPDATED / STATUS_CHANGED / PRIORITY_CHANGED: sólo los campos que cambian.
* TASK_LINKED: ``task_id`` y ``task_title``; reutiliza la versión actual.
"""

import logging
from enum import Enum
from typing import Any, Dict, List

from sqlmodel import Session

from reqtrace.models.requirement import Requirement
from reqtrace.models.requirement_history import HistoryAction, RequirementHistory
from reqtrace.models.task import Task
from reqtrace.schemas.requirement import FieldChange

logger = logging.getLogger(__name__)

TRACKED_FIELDS = ("title", "description", "type", "priority", "status")


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def snapshot(requirement: Requirement) -> List[FieldChange]:
    return [FieldChange(field=name, old=None, new=_plain(getattr(requirement, name))) for name in TRACKED_FIELDS]


def diff_fields(requirement: Requirement, updates: Dict[str, Any]) -> List[FieldChange]:
    """Compara los campos enviados con los guardados; los iguales no entran en el diff."""
    changes: List[FieldChange] = []
    for name in TRACKED_FIELDS:
        if name not in updates:
            continue
        old = _plain(getattr(requirement, name))
        new = _plain(updates[name])
        if old != new:
            changes.append(FieldChange(field=name, old=old, new=new))
    return changes


def resolve_action(changes: List[FieldChange]) -> HistoryAction:
    # Un único tipo de acción por fila: status > priority > genérico
    changed = {c.field for c in changes}
    if "status" in changed:
        return HistoryAction.STATUS_CHANGED
    if "priority" in changed:
        return HistoryAction.PRIORITY_CHANGED
    return HistoryAction.UPDATED


def task_link_changes(task: Task) -> List[FieldChange]:
    return [
        FieldChange(field="task_id", old=None, new=task.id),
        FieldChange(field="task_title", old=None, new=task.title),
    ]


def record(
    session: Session,
    requirement_id: int,
    user_id: int,
    action: HistoryAction,
    version: int,
    changes: List[FieldChange],
) -> RequirementHistory:
    """Añade la fila a la sesión; el commit lo hace quien abre la transacción."""
    entry = RequirementHistory(
        requirement_id=requirement_id,
        user_id=user_id,
        action=action,
        version=version,
        changes=[c.dict() for c in changes],
    )
    session.add(entry)
    logger.debug("history %s v%s for requirement %s", action.value, version, requirement_id)
    return entry
