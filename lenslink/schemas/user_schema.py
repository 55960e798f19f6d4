"""User identity records."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    CLIENT = "client"
    PHOTOGRAPHER = "photographer"
    ADMIN = "admin"


class User(BaseModel):
    """A registered account. Deactivated rather than deleted."""

    id: str
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Lower-cased, unique across users")
    password_hash: Optional[str] = Field(None, description="Opaque hash from the auth layer")
    phone: Optional[str] = None
    role: UserRole = UserRole.CLIENT
    is_active: bool = True
    is_verified: bool = False
    last_login: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
