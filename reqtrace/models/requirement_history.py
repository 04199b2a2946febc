from enum import Enum
from typing import Any, Dict, List, Optional
from sqlalchemy import JSON, event
from sqlmodel import SQLModel, Field, Column
from datetime import datetime


class HistoryAction(str, Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    STATUS_CHANGED = "STATUS_CHANGED"
    PRIORITY_CHANGED = "PRIORITY_CHANGED"
    TASK_LINKED = "TASK_LINKED"


class RequirementHistory(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    requirement_id: int = Field(foreign_key="requirement.id", index=True)
    user_id: int = Field(foreign_key="user.id")
    action: HistoryAction
    version: int
    # Lista ordenada de {"field", "old", "new"}
    changes: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow)


@event.listens_for(RequirementHistory, "before_update")
def _reject_history_update(mapper, connection, target):
    raise RuntimeError("RequirementHistory rows are append-only")
