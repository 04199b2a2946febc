from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime


class User(SQLModel, table=True):
    """Principal sincronizado desde el proveedor de identidad."""

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: Optional[str] = Field(default=None, index=True)
    image: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
