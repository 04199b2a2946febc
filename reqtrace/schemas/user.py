# schemas/user.py

from typing import Optional
from pydantic import BaseModel
from datetime import datetime


class UserBrief(BaseModel):
    id: int
    name: str
    image: Optional[str] = None

    class Config:
        from_attributes = True


class UserRead(BaseModel):
    id: int
    name: str
    email: Optional[str]
    image: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
